"""树形编辑器模块。

本模块实现三种相互递归的编辑器：
- ObjectEditor: 对象编辑器，按字段分类顺序渲染属性
- ArrayEditor: 数组编辑器，支持追加、删除、替换元素
- PrimitiveEditor: 标量编辑器，按控件类型解析输入

编辑器在构建时捕获当前值，不持有跨渲染的状态。每次编辑都会
浅拷贝直接容器并替换变更的子节点，再交给父节点继续向上重建，
最终把新的根值交给调用方。
"""

import math
import re
from collections.abc import Callable
from typing import Any, TypeAlias

import orjson

from schemaform.constants import (
    AUTO_EXPAND_DEPTH,
    MULTILINE_MAX_LENGTH,
    TEXTAREA_FORMAT,
    EditPath,
)
from schemaform.exceptions import EditPathError
from schemaform.form._defaults import synthesize_default
from schemaform.form._models import Kind, SchemaNode, Widget
from schemaform.form._reconcile import (
    append_item,
    assoc,
    format_path,
    remove_at,
    replace_at,
)
from schemaform.form._resolver import classify_properties, format_label, resolve_kind
from schemaform.logger import logger

Emit: TypeAlias = Callable[[Any], None]

_IMPLICIT_ITEM_SCHEMA = SchemaNode(type="string")

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_TRUE_WORDS = {"true", "1", "yes", "on"}


def to_display(value: Any) -> str:
    """将值转换为控件中显示的文本。

    遵循 JSON 文本习惯：布尔值为 true/false，整数值的浮点数不带小数部分。

    Args:
        value: 任意值，None 显示为空字符串。

    Returns:
        显示文本。
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, int | float | str):
        return str(value)
    return orjson.dumps(value).decode("utf-8")


def option_text(option: Any) -> str:
    """枚举选项的显示文本，null 显示为 "null" 而不是空白。"""
    return "null" if option is None else to_display(option)


def is_truthy(value: Any) -> bool:
    """按 JSON 值判断真假。

    只有 None、false、0、NaN 和空字符串为假，空数组和空对象为真。
    """
    if isinstance(value, list | dict):
        return True
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _to_int(token: str) -> int | None:
    try:
        return int(token)
    except ValueError:
        # 超过解释器的整数字符串长度上限
        return None


def parse_number(text: str, integer: bool) -> int | float | None:
    """解析数值输入。

    只取文本开头的数字部分（例如 "12px" 解析为 12），
    整数类型会截断小数部分。无法解析时返回 None。

    Args:
        text: 输入文本。
        integer: 是否按整数解析。

    Returns:
        解析结果，失败时为 None。
    """
    if integer:
        match = _INT_PREFIX.match(text)
        return _to_int(match.group(1)) if match else None
    match = _FLOAT_PREFIX.match(text)
    if not match:
        return None
    token = match.group(1)
    if token.lstrip("+-").isdigit():
        return _to_int(token)
    number = float(token)
    return number if math.isfinite(number) else None


class EditorNode:
    """编辑器节点基类。

    Attributes:
        schema: 节点的 Schema。
        kind: 解析后的有效类型。
        value: 构建时捕获的值（复合节点为替换后的容器）。
        path: 相对根值的编辑路径。
        depth: 嵌套深度。
        name: 所属属性名，数组元素和根节点为 None。
        required: 是否标记为必填。
        expanded: 复合节点是否展开（仅用于展示）。
    """

    kind: Kind

    def __init__(
        self,
        schema: SchemaNode,
        value: Any,
        path: EditPath,
        emit: Emit,
        *,
        depth: int = 0,
        name: str | None = None,
        required: bool = False,
        expanded: bool = True,
        index: int | None = None,
    ):
        self.schema = schema
        self.kind = resolve_kind(schema)
        self.value = value
        self.path = path
        self.depth = depth
        self.name = name
        self.required = required
        self.expanded = expanded
        self.index = index
        self._emit = emit

    @property
    def label(self) -> str | None:
        """显示标签：优先使用 title，其次由属性名生成。"""
        if self.schema.title:
            return self.schema.title
        if self.name is not None:
            return format_label(self.name)
        if self.index is not None and self.kind.is_composite:
            return f"Item {self.index + 1}"
        return None

    @property
    def description(self) -> str | None:
        return self.schema.description

    @property
    def path_text(self) -> str:
        return format_path(self.path)

    def change(self, new_value: Any) -> None:
        """提交本节点的新值，沿父链重建到根。"""
        self._emit(new_value)

    def toggle_expanded(self) -> bool:
        """切换展开状态，返回新状态。"""
        self.expanded = not self.expanded
        return self.expanded

    def children(self) -> list["EditorNode"]:
        """按渲染顺序返回子节点。"""
        return []

    def child(self, part: str | int) -> "EditorNode":
        """按路径片段返回直接子节点。

        Raises:
            EditPathError: 子节点不存在时抛出。
        """
        raise EditPathError(format_path((*self.path, part)), f"{self.kind.value} node has no children")

    def find(self, path: EditPath) -> "EditorNode":
        """按相对路径查找后代节点。

        Args:
            path: 相对于本节点的路径。

        Returns:
            目标节点。

        Raises:
            EditPathError: 路径无法定位时抛出。
        """
        node = self
        for part in path:
            node = node.child(part)
        return node

    def describe(self) -> dict[str, Any]:
        """返回节点的结构描述，用于比较和展示。"""
        description = {
            "kind": self.kind.value,
            "path": self.path_text,
            "label": self.label,
            "required": self.required,
        }
        if self.kind.is_composite:
            description["expanded"] = self.expanded
        return description


class ObjectEditor(EditorNode):
    """对象编辑器。

    非对象值按空对象处理。属性按分类顺序渲染：先简单字段，再复合字段。
    值中存在但 Schema 未声明的键不渲染，但在每次编辑中原样保留。
    """

    def __init__(self, schema: SchemaNode, value: Any, path: EditPath, emit: Emit, **kwargs: Any):
        mapping = value if isinstance(value, dict) else {}
        super().__init__(schema, mapping, path, emit, **kwargs)
        properties = schema.properties or {}
        self.simple_names, self.complex_names = classify_properties(properties)
        self.fields: dict[str, EditorNode] = {}
        for name in self.simple_names + self.complex_names:
            composite = name in self.complex_names
            self.fields[name] = build_editor(
                properties[name],
                mapping.get(name),
                (*path, name),
                self._property_emitter(name),
                depth=self.depth + 1 if composite else self.depth,
                name=name,
                required=schema.is_required(name),
                expanded=not composite or self.depth < AUTO_EXPAND_DEPTH,
            )

    def _property_emitter(self, name: str) -> Emit:
        def emit(new_value: Any) -> None:
            self.change(assoc(self.value, name, new_value))

        return emit

    @property
    def simple_fields(self) -> list[EditorNode]:
        return [self.fields[name] for name in self.simple_names]

    @property
    def complex_fields(self) -> list[EditorNode]:
        return [self.fields[name] for name in self.complex_names]

    @property
    def extra_keys(self) -> list[str]:
        """值中存在但 Schema 未声明的键。"""
        return [key for key in self.value if key not in self.fields]

    def set_property(self, name: str, new_value: Any) -> None:
        """设置属性值，None 表示移除该属性。"""
        self.child(name).change(new_value)

    def children(self) -> list[EditorNode]:
        return list(self.fields.values())

    def child(self, part: str | int) -> EditorNode:
        if not isinstance(part, str) or part not in self.fields:
            raise EditPathError(format_path((*self.path, part)), "property not declared in schema")
        return self.fields[part]

    def describe(self) -> dict[str, Any]:
        description = super().describe()
        description["simple"] = [node.describe() for node in self.simple_fields]
        description["complex"] = [node.describe() for node in self.complex_fields]
        description["extra_keys"] = self.extra_keys
        return description


class ArrayEditor(EditorNode):
    """数组编辑器。

    非数组值按空数组处理。缺失 items 时元素按字符串处理。
    复合元素以“Item N”卡片渲染，始终展开。
    """

    def __init__(self, schema: SchemaNode, value: Any, path: EditPath, emit: Emit, **kwargs: Any):
        items = value if isinstance(value, list) else []
        super().__init__(schema, items, path, emit, **kwargs)
        self.item_schema = schema.items or _IMPLICIT_ITEM_SCHEMA
        self.item_kind = resolve_kind(self.item_schema)
        item_depth = self.depth + 1 if self.item_kind.is_composite else self.depth
        self.items: list[EditorNode] = [
            build_editor(
                self.item_schema,
                item,
                (*path, index),
                self._item_emitter(index),
                depth=item_depth,
                index=index,
            )
            for index, item in enumerate(items)
        ]

    def _item_emitter(self, index: int) -> Emit:
        def emit(new_value: Any) -> None:
            self.update(index, new_value)

        return emit

    @property
    def is_empty(self) -> bool:
        return not self.value

    def append(self) -> Any:
        """追加一个按 items 合成的默认元素。

        Returns:
            追加的元素。
        """
        item = synthesize_default(self.item_schema)
        logger.debug(f"Appending item to {self.path_text or '<root>'}")
        self.change(append_item(self.value, item))
        return item

    def remove(self, index: int) -> None:
        """删除指定位置的元素，后续元素依次前移。"""
        logger.debug(f"Removing item {index} from {self.path_text or '<root>'}")
        self.change(remove_at(self.value, index))

    def update(self, index: int, new_item: Any) -> None:
        """替换指定位置的元素。

        Raises:
            EditPathError: 索引越界时抛出。
        """
        try:
            updated = replace_at(self.value, index, new_item)
        except EditPathError as e:
            raise EditPathError(format_path((*self.path, index)), e.reason) from e
        self.change(updated)

    def children(self) -> list[EditorNode]:
        return list(self.items)

    def child(self, part: str | int) -> EditorNode:
        if not isinstance(part, int) or not 0 <= part < len(self.items):
            raise EditPathError(format_path((*self.path, part)), "no such array element")
        return self.items[part]

    def describe(self) -> dict[str, Any]:
        description = super().describe()
        description["item_kind"] = self.item_kind.value
        description["items"] = [node.describe() for node in self.items]
        return description


class PrimitiveEditor(EditorNode):
    """标量编辑器。

    控件类型按以下顺序确定：
    - 非空 enum: SELECT
    - boolean: TOGGLE
    - number/integer: NUMBER
    - format 为 textarea 或 maxLength > 200: TEXTAREA
    - 其他: TEXT
    """

    def __init__(self, schema: SchemaNode, value: Any, path: EditPath, emit: Emit, **kwargs: Any):
        super().__init__(schema, value, path, emit, **kwargs)
        self.widget = self._select_widget()

    def _select_widget(self) -> Widget:
        if self.schema.has_enum:
            return Widget.SELECT
        if self.kind == Kind.BOOLEAN:
            return Widget.TOGGLE
        if self.kind in (Kind.NUMBER, Kind.INTEGER):
            return Widget.NUMBER
        max_length = self.schema.max_length
        if self.schema.format == TEXTAREA_FORMAT or (
            max_length is not None and max_length > MULTILINE_MAX_LENGTH
        ):
            return Widget.TEXTAREA
        return Widget.TEXT

    @property
    def display(self) -> str:
        """控件中显示的文本。"""
        return to_display(self.value)

    @property
    def checked(self) -> bool:
        """开关控件的状态。"""
        return is_truthy(self.value)

    @property
    def options(self) -> list[str]:
        """下拉控件的选项文本。"""
        return [option_text(option) for option in self.schema.enum or []]

    @property
    def minimum(self) -> float | None:
        return self.schema.minimum

    @property
    def maximum(self) -> float | None:
        return self.schema.maximum

    def select(self, choice: str) -> None:
        """选择下拉选项。

        按显示文本匹配第一个枚举字面量，以保留其原始类型；
        没有匹配时提交原始文本。
        """
        for option in self.schema.enum or []:
            if option_text(option) == choice:
                self.change(option)
                return
        self.change(choice)

    def toggle(self, checked: bool) -> None:
        self.change(bool(checked))

    def input(self, text: str) -> None:
        """按控件类型处理文本输入。

        - NUMBER: 解析失败时提交 None（未设置）
        - TEXT: 空字符串提交 None（未设置）
        - TEXTAREA: 原样提交
        - SELECT/TOGGLE: 转交 select/toggle
        """
        if self.widget == Widget.SELECT:
            self.select(text)
        elif self.widget == Widget.TOGGLE:
            self.toggle(text.strip().lower() in _TRUE_WORDS)
        elif self.widget == Widget.NUMBER:
            self.change(parse_number(text, integer=self.kind == Kind.INTEGER))
        elif self.widget == Widget.TEXTAREA:
            self.change(text)
        else:
            self.change(text or None)

    def describe(self) -> dict[str, Any]:
        description = super().describe()
        description["widget"] = self.widget.value
        description["display"] = self.display
        if self.widget == Widget.SELECT:
            description["options"] = self.options
        return description


_EDITORS: dict[Kind, type[EditorNode]] = {
    Kind.OBJECT: ObjectEditor,
    Kind.ARRAY: ArrayEditor,
    Kind.STRING: PrimitiveEditor,
    Kind.NUMBER: PrimitiveEditor,
    Kind.INTEGER: PrimitiveEditor,
    Kind.BOOLEAN: PrimitiveEditor,
}


def build_editor(schema: SchemaNode, value: Any, path: EditPath, emit: Emit, **kwargs: Any) -> EditorNode:
    """按有效类型构建编辑器节点。

    Args:
        schema: Schema 节点。
        value: 当前值。
        path: 编辑路径。
        emit: 新值回调，由父节点提供。
        **kwargs: 传递给编辑器的其他参数（depth、name、required 等）。

    Returns:
        编辑器节点。
    """
    return _EDITORS[resolve_kind(schema)](schema, value, path, emit, **kwargs)
