"""Schema 类型解析与字段分类模块。

本模块提供：
- 节点有效类型的解析（Kind）
- 对象属性的简单/复合分组
- 属性名到显示标签的转换
"""

import re
from collections.abc import Mapping

from schemaform.form._models import Kind, SchemaNode

_KINDS_BY_NAME: dict[str, Kind] = {kind.value: kind for kind in Kind}

_UPPER_PATTERN = re.compile(r"([A-Z])")
_SEPARATOR_PATTERN = re.compile(r"[_-]")
_LEADING_WORD_PATTERN = re.compile(r"^\w")


def resolve_kind(node: SchemaNode) -> Kind:
    """解析 Schema 节点的有效类型。

    按优先级依次判断：
    1. 声明的 type（列表形式取首项）
    2. 存在 properties 则为 object
    3. 存在 items 则为 array
    4. 其余情况（包括只有 enum）为 string

    未知类型名和 null 降级为 string，不会抛出异常。

    Args:
        node: Schema 节点。

    Returns:
        节点的有效类型。
    """
    hint = node.kind_hint
    if isinstance(hint, list):
        hint = hint[0] if hint else None
    if hint is not None:
        return _KINDS_BY_NAME.get(hint, Kind.STRING)
    if node.properties is not None:
        return Kind.OBJECT
    if node.items is not None:
        return Kind.ARRAY
    return Kind.STRING


def classify_properties(properties: Mapping[str, SchemaNode]) -> tuple[list[str], list[str]]:
    """将对象属性划分为简单字段和复合字段。

    复合字段（object/array）以可折叠区块渲染，其余字段以紧凑网格渲染。
    两个列表都保持属性的声明顺序。

    Args:
        properties: 属性名到 Schema 节点的有序映射。

    Returns:
        (简单字段名列表, 复合字段名列表)。
    """
    simple: list[str] = []
    complex_: list[str] = []
    for name, prop in properties.items():
        if resolve_kind(prop).is_composite:
            complex_.append(name)
        else:
            simple.append(name)
    return simple, complex_


def format_label(name: str) -> str:
    """将属性名转换为显示标签。

    例如 maxRetries -> Max Retries，log_level -> Log level。

    Args:
        name: 属性名。

    Returns:
        显示标签。
    """
    label = _UPPER_PATTERN.sub(r" \1", name)
    label = _SEPARATOR_PATTERN.sub(" ", label)
    label = _LEADING_WORD_PATTERN.sub(lambda m: m.group(0).upper(), label)
    return label.strip()
