"""变更传播与路径协调模块。

本模块提供不可变的容器更新辅助函数。所有函数都返回新的容器，
从不修改传入的值；未改动的子树按引用复用（结构共享）。

路径使用 (键, 索引, ...) 元组表示，文本形式为 a.b[0].c。
"""

from typing import Any

from schemaform.constants import EditPath, PathPart
from schemaform.exceptions import EditPathError


def format_path(parts: EditPath) -> str:
    """格式化编辑路径。

    Args:
        parts: 路径片段。

    Returns:
        格式化后的路径字符串，根路径为空字符串。
    """
    path = ""
    for part in parts:
        if isinstance(part, int):
            path = f"{path}[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def parse_path(text: str) -> EditPath:
    """解析文本形式的编辑路径。

    Args:
        text: 形如 a.b[0].c 的路径，空字符串表示根路径。

    Returns:
        路径片段元组。

    Raises:
        EditPathError: 路径格式错误时抛出。
    """
    parts: list[PathPart] = []
    key = ""
    i = 0
    expect_key = True
    while i < len(text):
        char = text[i]
        if char == ".":
            if expect_key and not key:
                raise EditPathError(text, "empty key")
            if key:
                parts.append(key)
                key = ""
            expect_key = True
        elif char == "[":
            if key:
                parts.append(key)
                key = ""
            end = text.find("]", i)
            if end == -1:
                raise EditPathError(text, "unclosed index")
            index = text[i + 1 : end]
            if not index.isdigit():
                raise EditPathError(text, f"index must be a non-negative integer, got '{index}'")
            parts.append(int(index))
            i = end
            expect_key = False
        elif char == "]":
            raise EditPathError(text, "unexpected ']'")
        else:
            key += char
        i += 1
    if key:
        parts.append(key)
    elif text.endswith("."):
        raise EditPathError(text, "empty key")
    return tuple(parts)


def assoc(mapping: dict[str, Any], key: str, value: Any) -> dict[str, Any]:
    """返回替换了一个键的新映射。

    value 为 None 时表示“未设置”，等价于 dissoc。
    """
    if value is None:
        return dissoc(mapping, key)
    return {**mapping, key: value}


def dissoc(mapping: dict[str, Any], key: str) -> dict[str, Any]:
    """返回去掉一个键的新映射，其余键保持原有顺序。"""
    return {k: v for k, v in mapping.items() if k != key}


def replace_at(items: list[Any], index: int, value: Any) -> list[Any]:
    """返回替换了一个位置的新列表。

    Raises:
        EditPathError: 索引越界时抛出。
    """
    if not 0 <= index < len(items):
        raise EditPathError(f"[{index}]", f"index out of range for {len(items)} items")
    updated = list(items)
    updated[index] = value
    return updated


def remove_at(items: list[Any], index: int) -> list[Any]:
    """返回去掉一个位置的新列表，后续元素依次前移。

    越界索引不会报错，返回内容相同的新列表。
    """
    return [item for i, item in enumerate(items) if i != index]


def append_item(items: list[Any], value: Any) -> list[Any]:
    """返回在末尾追加一个元素的新列表。"""
    return [*items, value]


def get_in(root: Any, path: EditPath) -> Any:
    """按路径读取值。

    缺失的对象键返回 None。

    Raises:
        EditPathError: 路径经过非容器值或数组索引越界时抛出。
    """
    current = root
    for depth, part in enumerate(path):
        if isinstance(part, int):
            if not isinstance(current, list) or not 0 <= part < len(current):
                raise EditPathError(format_path(path[: depth + 1]), "no such array element")
            current = current[part]
        else:
            if current is None:
                return None
            if not isinstance(current, dict):
                raise EditPathError(format_path(path[: depth + 1]), "parent is not an object")
            current = current.get(part)
    return current


def set_in(root: Any, path: EditPath, value: Any) -> Any:
    """按路径写入值，返回新的根值。

    沿路径重建每一层容器，其余子树按引用复用。

    Args:
        root: 原根值，不会被修改。
        path: 编辑路径。
        value: 新值，None 表示未设置。

    Returns:
        新的根值。

    Raises:
        EditPathError: 路径无法定位时抛出。
    """
    if not path:
        return value
    head, rest = path[0], path[1:]
    if isinstance(head, int):
        if not isinstance(root, list) or not 0 <= head < len(root):
            raise EditPathError(format_path(path), "no such array element")
        return replace_at(root, head, set_in(root[head], rest, value))
    if root is None and not rest:
        root = {}
    if not isinstance(root, dict):
        raise EditPathError(format_path(path), "parent is not an object")
    if rest and head not in root:
        raise EditPathError(format_path(path), f"missing key '{head}'")
    return assoc(root, head, set_in(root.get(head), rest, value))
