"""表单引擎入口模块。

本模块提供：
- render: 由 Schema 和当前值构建可编辑树（纯函数，不持有状态）
- FormState: 调用方持有的表单状态（当前值、基线、撤销历史）
"""

from collections.abc import Callable
from typing import Any

from schemaform.form._editors import EditorNode, build_editor
from schemaform.form._models import SchemaNode
from schemaform.logger import logger


def _discard(_value: Any) -> None:
    pass


def render(
    schema: "SchemaNode | dict[str, Any]",
    value: Any,
    on_change: Callable[[Any], None] | None = None,
) -> EditorNode:
    """构建可编辑树。

    引擎不保存任何值：每次编辑都会产生新的根值并交给 on_change，
    调用方负责保存它，并在下次渲染时重新传入。

    Args:
        schema: Schema 文档或已解析的节点。
        value: 当前根值，不会被修改。
        on_change: 新根值回调。

    Returns:
        根编辑器节点。

    Raises:
        SchemaError: Schema 文档无法解析时抛出。
    """
    node = SchemaNode.from_document(schema)
    return build_editor(node, value, (), on_change or _discard)


class FormState:
    """调用方持有的表单状态。

    保存 Schema、当前值、加载时的基线值和撤销历史。每个历史快照
    都是独立的不可变值，因此可以直接用于比较和撤销。

    Attributes:
        schema: 解析后的 Schema。
        value: 当前根值。
        baseline: 最近一次加载的值。
    """

    def __init__(self, schema: "SchemaNode | dict[str, Any]", value: Any):
        self.schema = SchemaNode.from_document(schema)
        self.value = value
        self.baseline = value
        self._history: list[Any] = []

    @property
    def tree(self) -> EditorNode:
        """按当前值渲染的可编辑树，编辑会更新 FormState。"""
        return render(self.schema, self.value, self._commit)

    @property
    def dirty(self) -> bool:
        """当前值是否与基线不同。"""
        return self.value != self.baseline

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    def _commit(self, new_value: Any) -> None:
        self._history.append(self.value)
        self.value = new_value

    def undo(self) -> bool:
        """恢复上一个快照。

        Returns:
            是否执行了撤销。
        """
        if not self._history:
            return False
        self.value = self._history.pop()
        return True

    def replace(self, value: Any) -> None:
        """载入外部的新值，重置基线和撤销历史。"""
        logger.debug("Replacing form value and resetting history")
        self.value = value
        self.baseline = value
        self._history.clear()
