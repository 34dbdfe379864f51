"""变更传播与路径协调测试。"""

import pytest

from schemaform.exceptions import EditPathError
from schemaform.form import format_path, get_in, parse_path, set_in
from schemaform.form._reconcile import append_item, assoc, dissoc, remove_at, replace_at


class TestPaths:
    """路径格式化与解析测试。"""

    @pytest.mark.parametrize(
        "parts, text",
        [
            ((), ""),
            (("name",), "name"),
            (("rules", 0, "port"), "rules[0].port"),
            ((0, 1), "[0][1]"),
            (("a", "b", 2), "a.b[2]"),
        ],
    )
    def test_format_and_parse(self, parts, text):
        """测试路径格式化与解析互为逆运算。"""
        assert format_path(parts) == text
        assert parse_path(text) == parts

    @pytest.mark.parametrize("text", ["a..b", ".a", "a.", "rules[x]", "rules[0", "a]", "rules[-1]"])
    def test_parse_invalid_path(self, text):
        """测试非法路径。"""
        with pytest.raises(EditPathError) as exc_info:
            parse_path(text)
        assert exc_info.value.path == text


class TestContainerUpdates:
    """不可变容器更新测试。"""

    def test_assoc_returns_new_mapping(self):
        """测试 assoc 不修改原映射。"""
        original = {"a": 1, "b": 2}

        updated = assoc(original, "b", 3)

        assert updated == {"a": 1, "b": 3}
        assert original == {"a": 1, "b": 2}

    def test_assoc_none_removes_key(self):
        """测试 None 表示移除属性。"""
        assert assoc({"a": 1, "b": 2}, "a", None) == {"b": 2}

    def test_dissoc_keeps_order(self):
        """测试 dissoc 保持其余键的顺序。"""
        assert list(dissoc({"c": 1, "a": 2, "b": 3}, "a")) == ["c", "b"]

    def test_dissoc_missing_key(self):
        """测试移除不存在的键。"""
        original = {"a": 1}
        updated = dissoc(original, "z")
        assert updated == original
        assert updated is not original

    def test_replace_at(self):
        """测试替换元素。"""
        original = [1, 2, 3]
        assert replace_at(original, 1, 9) == [1, 9, 3]
        assert original == [1, 2, 3]

    def test_replace_at_out_of_range(self):
        """测试越界替换。"""
        with pytest.raises(EditPathError):
            replace_at([1], 3, 0)

    def test_remove_at_shifts_items(self):
        """测试删除后后续元素前移。"""
        assert remove_at(["a", "b", "c", "d"], 1) == ["a", "c", "d"]

    def test_remove_at_out_of_range(self):
        """测试越界删除返回内容相同的新列表。"""
        original = ["a", "b"]
        updated = remove_at(original, 5)
        assert updated == original
        assert updated is not original

    def test_append_item(self):
        """测试追加元素。"""
        original = [1]
        assert append_item(original, 2) == [1, 2]
        assert original == [1]


class TestGetSetIn:
    """按路径读写测试。"""

    def test_get_in(self, firewall_value):
        """测试按路径读取。"""
        assert get_in(firewall_value, ("rules", 1, "port")) == 443
        assert get_in(firewall_value, ()) is firewall_value

    def test_get_in_missing_key_is_none(self, firewall_value):
        """测试缺失键返回 None。"""
        assert get_in(firewall_value, ("maxConnections",)) is None
        assert get_in(firewall_value, ("limits", "burst", "window", "seconds")) is None

    def test_get_in_bad_index(self, firewall_value):
        """测试越界索引。"""
        with pytest.raises(EditPathError) as exc_info:
            get_in(firewall_value, ("rules", 9, "port"))
        assert exc_info.value.path == "rules[9]"

    def test_get_in_through_scalar(self, firewall_value):
        """测试路径经过标量值。"""
        with pytest.raises(EditPathError):
            get_in(firewall_value, ("owner", "name"))

    def test_set_in_shares_untouched_subtrees(self, firewall_value):
        """测试只重建路径上的容器。"""
        updated = set_in(firewall_value, ("rules", 1, "port"), 8443)

        assert updated["rules"][1]["port"] == 8443
        assert firewall_value["rules"][1]["port"] == 443
        assert updated is not firewall_value
        assert updated["rules"] is not firewall_value["rules"]
        assert updated["rules"][0] is firewall_value["rules"][0]
        assert updated["rules"][2] is firewall_value["rules"][2]
        assert updated["limits"] is firewall_value["limits"]

    def test_set_in_none_removes_key(self, firewall_value):
        """测试写入 None 移除属性。"""
        updated = set_in(firewall_value, ("limits", "perMinute"), None)
        assert updated["limits"] == {"burst": {"size": 1.5}}

    def test_set_in_root(self):
        """测试空路径替换根值。"""
        assert set_in({"a": 1}, (), [1, 2]) == [1, 2]

    def test_set_in_missing_parent(self, firewall_value):
        """测试中间容器缺失。"""
        with pytest.raises(EditPathError):
            set_in(firewall_value, ("limits", "burst", "window", "seconds"), 30)
