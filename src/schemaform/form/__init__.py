"""配置表单引擎模块。

本模块负责将 Schema 文档和当前值转换为可编辑树，包括：
- Schema 类型解析
- 字段分类（简单字段/复合字段）
- 对象、数组、标量编辑器
- 默认值合成
- 不可变的变更传播
"""

from schemaform.form._defaults import synthesize_default
from schemaform.form._editors import (
    ArrayEditor,
    EditorNode,
    ObjectEditor,
    PrimitiveEditor,
    build_editor,
    is_truthy,
    option_text,
    parse_number,
    to_display,
)
from schemaform.form._models import Kind, SchemaNode, Widget
from schemaform.form._reconcile import format_path, get_in, parse_path, set_in
from schemaform.form._resolver import classify_properties, format_label, resolve_kind
from schemaform.form.engine import FormState, render

__all__ = [
    "Kind",
    "Widget",
    "SchemaNode",
    "resolve_kind",
    "classify_properties",
    "format_label",
    "synthesize_default",
    "EditorNode",
    "ObjectEditor",
    "ArrayEditor",
    "PrimitiveEditor",
    "build_editor",
    "parse_number",
    "is_truthy",
    "option_text",
    "to_display",
    "format_path",
    "parse_path",
    "get_in",
    "set_in",
    "render",
    "FormState",
]
