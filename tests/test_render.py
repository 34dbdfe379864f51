"""终端渲染测试。"""

import io

from rich.console import Console
from rich.tree import Tree

from schemaform.console import build_tree
from schemaform.form import render


def _text(tree: Tree) -> str:
    console = Console(file=io.StringIO(), width=120, record=True, color_system=None)
    console.print(tree)
    return console.export_text()


class TestBuildTree:
    """Rich 树渲染测试。"""

    def test_scalar_fields(self, firewall_schema, firewall_value):
        """测试标量字段的标签和值。"""
        text = _text(build_tree(render(firewall_schema, firewall_value)))

        assert "Firewall" in text
        assert "Owner *: netops" in text
        assert "Enabled: on" in text
        assert "Turn the firewall on" in text
        assert "Mode: audit (audit | enforce)" in text
        assert "Max Connections: (unset)" in text
        assert "tags[0]: edge" in text

    def test_sections(self, firewall_schema, firewall_value):
        """测试复合字段渲染为区块。"""
        text = _text(build_tree(render(firewall_schema, firewall_value)))

        assert "▼ Rules * Array" in text
        assert "▼ Item 2 Object" in text
        assert "Port: 443" in text
        assert "▼ Burst Object" in text
        assert "▶ Window Object" in text
        assert "Seconds" not in text
        assert "+ unrendered keys kept as is: _revision" in text

    def test_expand_all(self, firewall_schema, firewall_value):
        """测试展开所有区块。"""
        text = _text(build_tree(render(firewall_schema, firewall_value), expand_all=True))

        assert "▼ Window Object" in text
        assert "Seconds: (unset)" in text

    def test_collapsed_section(self, firewall_schema, firewall_value):
        """测试手动折叠的区块不显示内容。"""
        root = render(firewall_schema, firewall_value)
        root.child("rules").toggle_expanded()

        text = _text(build_tree(root))

        assert "▶ Rules * Array" in text
        assert "Item 1" not in text

    def test_empty_array(self, firewall_schema):
        """测试空数组显示占位提示。"""
        text = _text(build_tree(render(firewall_schema, {})))
        assert "No items" in text

    def test_title_and_markup_escaped(self):
        """测试标题和用户文本中的方括号原样显示。"""
        schema = {"type": "object", "properties": {"pattern": {"type": "string"}}}

        text = _text(build_tree(render(schema, {"pattern": "[a-z]+"}), title="[custom]"))

        assert "[custom]" in text
        assert "Pattern: [a-z]+" in text

    def test_scalar_root(self):
        """测试根节点为标量。"""
        text = _text(build_tree(render({"type": "boolean", "title": "Enabled"}, False)))
        assert "Enabled: off" in text
