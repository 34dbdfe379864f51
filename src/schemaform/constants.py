"""全局常量定义模块。

本模块定义了 SchemaForm 项目中使用的全局常量，包括：
- API 客户端默认配置
- 日志级别配置
- 表单渲染阈值
"""

from typing import TypeAlias

DEFAULT_API_BASE_URL = "http://localhost:8000/api/v1"
DEFAULT_API_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"
CONFIG_FILE_NAME = "config.yaml"

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# Composite sections whose depth is below this value start expanded.
AUTO_EXPAND_DEPTH = 2
MULTILINE_MAX_LENGTH = 200
TEXTAREA_FORMAT = "textarea"

SCHEMA_META_KEYS = ("$schema", "$id")
EMPTY_OBJECT_SCHEMA: dict[str, object] = {"type": "object", "properties": {}}

VALIDATION_ERROR_CODE = "VALIDATION_ERROR"

PathPart: TypeAlias = str | int
EditPath: TypeAlias = tuple[PathPart, ...]
