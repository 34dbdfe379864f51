"""Document file utility module.

This module reads and writes the schema and value documents used by the CLI.
JSON is handled with orjson, YAML with PyYAML; the format is chosen by the
file extension.
"""

from pathlib import Path
from typing import Any

import orjson
import yaml

from schemaform.exceptions import SchemaFormError

YAML_SUFFIXES = {".yaml", ".yml"}


def load_document(file_path: str | Path) -> Any:
    """Reads a JSON or YAML document.

    Args:
        file_path: The path to the document.

    Returns:
        The parsed content. An empty YAML file yields None.

    Raises:
        SchemaFormError: If the file is missing or cannot be parsed.
    """
    path = Path(file_path)
    if not path.exists():
        raise SchemaFormError(f"File not found: {path}")
    content = path.read_bytes()
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(content)
        return orjson.loads(content)
    except (orjson.JSONDecodeError, yaml.YAMLError) as e:
        raise SchemaFormError(f"Failed to parse {path}: {e}") from e


def dump_json(value: Any) -> str:
    """Serializes a value as indented JSON, preserving key order."""
    return orjson.dumps(value, option=orjson.OPT_INDENT_2).decode("utf-8")


def write_document(file_path: str | Path, value: Any) -> None:
    """Writes a value back in the format implied by the file extension.

    Args:
        file_path: The destination path.
        value: The value to write.
    """
    path = Path(file_path)
    if path.suffix.lower() in YAML_SUFFIXES:
        text = yaml.safe_dump(value, allow_unicode=True, sort_keys=False, default_flow_style=False)
    else:
        text = dump_json(value) + "\n"
    path.write_text(text, encoding="utf-8")
