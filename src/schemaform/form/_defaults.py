"""默认值合成模块。

为 Schema 节点生成形状一致的空值，仅在数组追加元素时使用。
对象和标量编辑器不会主动为缺失的值填充默认值，
以保留“显式置空”和“未设置”之间的区别。
"""

import copy
from typing import Any

from schemaform.form._models import Kind, SchemaNode
from schemaform.form._resolver import resolve_kind

_ZERO_VALUES = {
    Kind.OBJECT: dict,
    Kind.ARRAY: list,
    Kind.BOOLEAN: lambda: False,
    Kind.NUMBER: lambda: 0,
    Kind.INTEGER: lambda: 0,
    Kind.STRING: lambda: "",
}


def synthesize_default(node: SchemaNode) -> Any:
    """为 Schema 节点合成默认值。

    存在 default 时返回其副本；否则返回有效类型的零值：
    object -> {}，array -> []，boolean -> False，number/integer -> 0，string -> ""。
    对象的零值是空对象，不会按 properties 展开。

    Args:
        node: Schema 节点。

    Returns:
        合成的默认值。
    """
    if node.has_default:
        return copy.deepcopy(node.default_value)
    return _ZERO_VALUES[resolve_kind(node)]()
