"""表单 Schema 模型定义模块。

本模块定义了表单引擎使用的 Pydantic 模型和枚举，包括：
- Kind: 节点的有效类型（封闭枚举）
- Widget: 标量字段的控件类型
- SchemaNode: 单个 Schema 节点
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from schemaform.constants import SCHEMA_META_KEYS
from schemaform.exceptions import SchemaError


class Kind(str, Enum):
    """Schema 节点的有效类型。"""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"

    @property
    def is_composite(self) -> bool:
        """是否为需要递归渲染的复合类型。"""
        return self in (Kind.OBJECT, Kind.ARRAY)


class Widget(str, Enum):
    """标量字段的控件类型。"""

    SELECT = "select"
    TOGGLE = "toggle"
    NUMBER = "number"
    TEXTAREA = "textarea"
    TEXT = "text"


class SchemaNode(BaseModel):
    """Schema 节点。

    对应 JSON Schema 的一个子模式，只保留表单渲染需要的关键字。
    解析过程是宽松的：格式错误的 properties、items、required、enum
    以及类型不符的范围和长度提示会被忽略，而不是导致整个文档解析失败。

    Attributes:
        kind_hint: 声明的类型，字符串或类型列表（首项生效）。
        title: 显示标题。
        description: 字段说明。
        properties: 属性名到子节点的有序映射。
        items: 数组元素的 Schema。
        required: 需要标记为必填的属性名。
        enum: 可选值列表。
        default_value: 默认值，是否存在由 has_default 判断。
        minimum: 数值下限（仅提示）。
        maximum: 数值上限（仅提示）。
        min_length: 最小长度（仅提示）。
        max_length: 最大长度，超过 200 时使用多行输入。
        pattern: 正则约束（仅提示）。
        format: 格式提示，textarea 表示多行输入。
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    kind_hint: str | list[str] | None = Field(default=None, alias="type")
    title: str | None = None
    description: str | None = None
    properties: dict[str, "SchemaNode"] | None = None
    items: "SchemaNode | None" = None
    required: list[str] = Field(default_factory=list)
    enum: list[Any] | None = None
    default_value: Any = Field(default=None, alias="default")
    minimum: float | None = None
    maximum: float | None = None
    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    pattern: str | None = None
    format: str | None = None

    @field_validator("kind_hint", mode="before")
    @classmethod
    def validate_kind_hint(cls, v: Any) -> str | list[str] | None:
        """过滤无效的类型声明。

        Args:
            v: 原始 type 值。

        Returns:
            字符串、非空字符串列表或 None。
        """
        if isinstance(v, str):
            return v
        if isinstance(v, list):
            names = [item for item in v if isinstance(item, str)]
            return names or None
        return None

    @field_validator("properties", mode="before")
    @classmethod
    def validate_properties(cls, v: Any) -> dict[str, Any] | None:
        """丢弃不是对象的属性定义。

        Args:
            v: 原始 properties 值。

        Returns:
            只包含对象形式子节点的映射，或 None。
        """
        if not isinstance(v, dict):
            return None
        return {str(name): sub for name, sub in v.items() if isinstance(sub, dict | SchemaNode)}

    @field_validator("items", mode="before")
    @classmethod
    def validate_items(cls, v: Any) -> Any:
        """只接受单个对象形式的 items，元组形式视为缺失。"""
        if isinstance(v, dict | SchemaNode):
            return v
        return None

    @field_validator("required", mode="before")
    @classmethod
    def validate_required(cls, v: Any) -> list[str]:
        """过滤非字符串的必填项。"""
        if not isinstance(v, list):
            return []
        return [name for name in v if isinstance(name, str)]

    @field_validator("enum", mode="before")
    @classmethod
    def validate_enum(cls, v: Any) -> list[Any] | None:
        """只接受列表形式的枚举值。"""
        return v if isinstance(v, list) else None

    @field_validator("minimum", "maximum", mode="before")
    @classmethod
    def validate_bound(cls, v: Any) -> float | None:
        """非数值的范围提示视为缺失。"""
        if isinstance(v, bool) or not isinstance(v, int | float):
            return None
        return v

    @field_validator("min_length", "max_length", mode="before")
    @classmethod
    def validate_length(cls, v: Any) -> int | None:
        """长度提示只接受整数（包括 5.0 这样的整数值浮点数），其余视为缺失。"""
        if isinstance(v, bool):
            return None
        if isinstance(v, int):
            return v
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return None

    @field_validator("title", "description", "pattern", "format", mode="before")
    @classmethod
    def validate_text(cls, v: Any) -> str | None:
        """非字符串的展示文本视为缺失。"""
        return v if isinstance(v, str) else None

    @property
    def has_default(self) -> bool:
        """是否显式声明了 default（包括 default: null）。"""
        return "default_value" in self.model_fields_set

    @property
    def has_enum(self) -> bool:
        """是否为非空枚举。"""
        return bool(self.enum)

    def is_required(self, name: str) -> bool:
        """判断属性是否需要标记为必填。"""
        return name in self.required

    @classmethod
    def from_document(cls, document: "dict[str, Any] | SchemaNode") -> "SchemaNode":
        """从 Schema 文档构建节点。

        去除 $schema、$id 等文档级关键字后解析。

        Args:
            document: Schema 文档或已解析的节点。

        Returns:
            解析后的 SchemaNode。

        Raises:
            SchemaError: 文档不是对象或无法解析时抛出。
        """
        if isinstance(document, SchemaNode):
            return document
        if not isinstance(document, dict):
            raise SchemaError(f"Schema document must be an object, got {type(document).__name__}")
        cleaned = {key: value for key, value in document.items() if key not in SCHEMA_META_KEYS}
        try:
            return cls.model_validate(cleaned)
        except ValidationError as e:
            raise SchemaError(f"Invalid schema document: {e}") from e


SchemaNode.model_rebuild()
