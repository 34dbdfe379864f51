"""可编辑树的终端渲染模块。

使用 Rich 将编辑器树渲染为终端中的树形视图：
简单字段显示为 标签: 值，复合字段显示为可折叠区块。
"""

from rich.markup import escape
from rich.tree import Tree

from schemaform.form._editors import ArrayEditor, EditorNode, ObjectEditor, PrimitiveEditor
from schemaform.form._models import Kind, Widget

_KIND_TAGS = {Kind.OBJECT: "Object", Kind.ARRAY: "Array"}


def _required_mark(node: EditorNode) -> str:
    return " [red]*[/red]" if node.required else ""


def _scalar_text(node: PrimitiveEditor) -> str:
    label = escape(node.label) if node.label else f"[dim]{escape(node.path_text)}[/dim]"
    if node.widget == Widget.TOGGLE:
        value = "[green]on[/green]" if node.checked else "[red]off[/red]"
    elif node.value is None:
        value = "[dim](unset)[/dim]"
    else:
        value = f"[cyan]{escape(node.display)}[/cyan]"
    text = f"{label}{_required_mark(node)}: {value}"
    if node.widget == Widget.SELECT:
        text += f" [dim]({escape(' | '.join(node.options))})[/dim]"
    if node.description:
        text += f"\n[dim]{escape(node.description)}[/dim]"
    return text


def _section_text(node: EditorNode, open_: bool) -> str:
    marker = "▼" if open_ else "▶"
    label = escape(node.label or node.path_text or "Configuration")
    text = f"{marker} [bold]{label}[/bold]{_required_mark(node)} [dim]{_KIND_TAGS[node.kind]}[/dim]"
    if node.description:
        text += f"\n[dim]{escape(node.description)}[/dim]"
    return text


def _add_children(tree: Tree, node: EditorNode, expand_all: bool) -> None:
    if isinstance(node, ArrayEditor) and node.is_empty:
        tree.add("[italic dim]No items[/italic dim]")
    for child in node.children():
        _add_node(tree, child, expand_all)
    if isinstance(node, ObjectEditor) and node.extra_keys:
        keys = ", ".join(node.extra_keys)
        tree.add(f"[dim]+ unrendered keys kept as is: {escape(keys)}[/dim]")


def _add_node(parent: Tree, node: EditorNode, expand_all: bool) -> None:
    if isinstance(node, PrimitiveEditor):
        parent.add(_scalar_text(node))
        return
    open_ = expand_all or node.expanded
    branch = parent.add(_section_text(node, open_))
    if open_:
        _add_children(branch, node, expand_all)


def build_tree(root: EditorNode, title: str | None = None, expand_all: bool = False) -> Tree:
    """将编辑器树转换为 Rich Tree。

    折叠的区块只显示标题行，expand_all 为 True 时忽略折叠状态。

    Args:
        root: 根编辑器节点。
        title: 树的标题，默认使用根节点标签。
        expand_all: 是否展开所有区块。

    Returns:
        Rich Tree 实例。
    """
    heading = title or root.label or "Configuration"
    tree = Tree(f"[bold]{escape(heading)}[/bold]")
    if isinstance(root, PrimitiveEditor):
        tree.add(_scalar_text(root))
    else:
        _add_children(tree, root, expand_all)
    return tree
