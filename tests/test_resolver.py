"""类型解析与字段分类测试。"""

import pytest

from schemaform.form import Kind, SchemaNode, classify_properties, format_label, resolve_kind


def _node(document: dict) -> SchemaNode:
    return SchemaNode.from_document(document)


class TestResolveKind:
    """有效类型解析测试。"""

    @pytest.mark.parametrize(
        "document, expected",
        [
            ({"type": "object"}, Kind.OBJECT),
            ({"type": "array"}, Kind.ARRAY),
            ({"type": "integer"}, Kind.INTEGER),
            ({"type": "number"}, Kind.NUMBER),
            ({"type": "boolean"}, Kind.BOOLEAN),
            ({"type": "string"}, Kind.STRING),
        ],
    )
    def test_declared_type(self, document, expected):
        """测试声明的类型直接生效。"""
        assert resolve_kind(_node(document)) == expected

    def test_type_list_uses_first_entry(self):
        """测试类型列表取首项。"""
        assert resolve_kind(_node({"type": ["integer", "null"]})) == Kind.INTEGER

    def test_declared_type_wins_over_properties(self):
        """测试声明类型优先于结构推断。"""
        node = _node({"type": "string", "properties": {"a": {"type": "string"}}})
        assert resolve_kind(node) == Kind.STRING

    def test_properties_imply_object(self):
        """测试存在 properties 时推断为对象。"""
        assert resolve_kind(_node({"properties": {}})) == Kind.OBJECT

    def test_items_imply_array(self):
        """测试存在 items 时推断为数组。"""
        assert resolve_kind(_node({"items": {"type": "string"}})) == Kind.ARRAY

    def test_enum_only_is_string(self):
        """测试只有 enum 的节点按字符串处理。"""
        assert resolve_kind(_node({"enum": [1, 2, 3]})) == Kind.STRING

    def test_empty_schema_is_string(self):
        """测试空 Schema 按字符串处理。"""
        assert resolve_kind(_node({})) == Kind.STRING

    @pytest.mark.parametrize("type_name", ["null", "date", "Object"])
    def test_unknown_type_degrades_to_string(self, type_name):
        """测试未知类型名降级为字符串。"""
        assert resolve_kind(_node({"type": type_name})) == Kind.STRING

    def test_empty_type_list_treated_as_absent(self):
        """测试空类型列表视为未声明。"""
        assert resolve_kind(_node({"type": [], "items": {}})) == Kind.ARRAY


class TestClassifyProperties:
    """属性分组测试。"""

    def test_simple_and_complex_split(self):
        """测试简单字段与复合字段分组。"""
        node = _node(
            {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                    "enabled": {"type": "boolean"},
                },
            }
        )

        simple, complex_ = classify_properties(node.properties)

        assert simple == ["name", "enabled"]
        assert complex_ == ["tags"]

    def test_declaration_order_preserved(self):
        """测试分组内保持声明顺序。"""
        node = _node(
            {
                "properties": {
                    "zeta": {"type": "object"},
                    "alpha": {"type": "integer"},
                    "beta": {"properties": {}},
                    "gamma": {"enum": ["a"]},
                }
            }
        )

        simple, complex_ = classify_properties(node.properties)

        assert simple == ["alpha", "gamma"]
        assert complex_ == ["zeta", "beta"]

    def test_empty_properties(self):
        """测试空属性映射。"""
        assert classify_properties({}) == ([], [])


class TestFormatLabel:
    """标签生成测试。"""

    @pytest.mark.parametrize(
        "name, label",
        [
            ("maxRetries", "Max Retries"),
            ("log_level", "Log level"),
            ("rate-limit", "Rate limit"),
            ("enabled", "Enabled"),
            ("URL", "U R L"),
        ],
    )
    def test_format_label(self, name, label):
        """测试属性名转换为标签。"""
        assert format_label(name) == label
