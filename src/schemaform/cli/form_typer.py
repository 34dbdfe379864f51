"""FormTyper - 将表单引擎和配置会话暴露为 CLI 命令。"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from schemaform import __version__
from schemaform.config import get_api_client
from schemaform.console.render import build_tree
from schemaform.console.session import ModuleEditorSession, describe_error
from schemaform.constants import CONFIG_FILE_NAME
from schemaform.exceptions import ApiError, SchemaFormError
from schemaform.form import (
    ArrayEditor,
    EditorNode,
    FormState,
    Kind,
    PrimitiveEditor,
    classify_properties,
    parse_path,
)
from schemaform.utils.documents import dump_json, load_document, write_document

DEFAULT_CONFIG_PATH = Path(CONFIG_FILE_NAME)

console = Console()


@contextmanager
def _cli_errors() -> Iterator[None]:
    """将项目异常转换为红色错误输出和退出码 1。"""
    try:
        yield
    except ApiError as e:
        console.print(f"[red]Error:[/red] {escape(describe_error(e))}", markup=True, highlight=False)
        raise typer.Exit(code=1) from e
    except SchemaFormError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", markup=True, highlight=False)
        raise typer.Exit(code=1) from e


def _load_form(schema_file: Path, value_file: Path | None) -> FormState:
    """读取 Schema 和值文件，构建表单状态。"""
    schema = load_document(schema_file)
    value = load_document(value_file) if value_file is not None else None
    return FormState(schema, value)


def _locate(state: FormState, path: str) -> EditorNode:
    return state.tree.find(parse_path(path))


def _emit_result(state: FormState, value_file: Path, write: bool) -> None:
    """输出编辑结果：写回文件或打印 JSON。"""
    if write:
        write_document(value_file, state.value)
        typer.echo(f"Updated {value_file}")
    else:
        typer.echo(dump_json(state.value))


class FormTyper(typer.Typer):
    """SchemaForm CLI 工具类。

    继承 typer.Typer，本地命令直接驱动表单引擎，远程命令通过
    ModuleEditorSession 访问配置 API。

    本地命令（操作 Schema/值文件）：
    - classify: 输出对象属性的简单/复合分组
    - render: 以树形视图渲染表单
    - set / unset: 设置或清除标量字段
    - append / remove: 追加或删除数组元素

    远程命令（访问配置 API）：
    - modules: 列出可配置模块
    - show: 显示租户/订阅下的模块配置
    - save: 提交新的覆盖配置
    - reset: 删除覆盖配置，恢复默认值

    全局选项：
    - --config, -c: 配置文件路径

    Example:
        ```bash
        schemaform render schema.json --value value.json
        schemaform set schema.json value.json "limits.maxConnections" 100 --write
        schemaform -c console.yaml show contoso network/firewall --subscription sub-01
        ```
    """

    def __init__(self, **kwargs: Any) -> None:
        """初始化 FormTyper。

        Args:
            **kwargs: 传递给 typer.Typer 的参数。
        """
        kwargs.setdefault("no_args_is_help", True)
        super().__init__(**kwargs)
        self._register_callback()
        self._register_commands()

    def _register_callback(self) -> None:
        """注册全局回调（处理 config 选项）。"""

        @self.callback()
        def main(
            config: Path = typer.Option(
                DEFAULT_CONFIG_PATH,
                "--config",
                "-c",
                help="配置文件路径",
            ),
        ) -> None:
            """SchemaForm 配置控制台。

            初始化应用上下文并配置日志。
            """
            from schemaform.config import AppContext
            from schemaform.logger import setup_logging

            with _cli_errors():
                ctx = AppContext.init(config)
            setup_logging(ctx.config.log_level)

    def _register_commands(self) -> None:
        """注册 CLI 命令。"""
        self._register_version_command()
        self._register_local_commands()
        self._register_remote_commands()

    def _register_version_command(self) -> None:
        """注册 version 命令。"""

        @self.command()
        def version() -> None:
            """显示版本信息。"""
            typer.echo(f"SchemaForm v{__version__}")

    def _register_local_commands(self) -> None:
        """注册操作本地文件的命令。"""
        self._register_classify_command()
        self._register_render_command()
        self._register_set_commands()
        self._register_array_commands()

    def _register_classify_command(self) -> None:
        """注册 classify 命令。"""

        @self.command()
        def classify(
            schema_file: Path = typer.Argument(..., help="Schema 文件（JSON/YAML）"),
            path: str = typer.Option("", "--path", "-p", help="对象节点的路径"),
        ) -> None:
            """输出对象属性的简单字段和复合字段分组。"""
            with _cli_errors():
                node = _locate(_load_form(schema_file, None), path)
                if node.kind != Kind.OBJECT:
                    raise SchemaFormError(f"'{path or '<root>'}' is not an object node")
                simple, complex_ = classify_properties(node.schema.properties or {})
            typer.echo(dump_json({"simple": simple, "complex": complex_}))

    def _register_render_command(self) -> None:
        """注册 render 命令。"""

        @self.command()
        def render(
            schema_file: Path = typer.Argument(..., help="Schema 文件（JSON/YAML）"),
            value_file: Path | None = typer.Option(None, "--value", "-v", help="值文件（JSON/YAML）"),
            expand_all: bool = typer.Option(False, "--expand-all", "-e", help="展开所有区块"),
        ) -> None:
            """以树形视图渲染表单。"""
            with _cli_errors():
                state = _load_form(schema_file, value_file)
                console.print(build_tree(state.tree, expand_all=expand_all))

    def _register_set_commands(self) -> None:
        """注册 set 和 unset 命令。"""

        @self.command("set")
        def set_value(
            schema_file: Path = typer.Argument(..., help="Schema 文件（JSON/YAML）"),
            value_file: Path = typer.Argument(..., help="值文件（JSON/YAML）"),
            path: str = typer.Argument(..., help="字段路径，例如 limits.ports[0]"),
            text: str = typer.Argument(..., help="输入文本，按字段控件类型解析"),
            write: bool = typer.Option(False, "--write", "-w", help="写回值文件"),
        ) -> None:
            """设置标量字段。

            文本按字段控件解析：数值字段解析失败时视为未设置，
            单行文本为空时视为未设置，枚举字段保留字面量的原始类型。
            """
            with _cli_errors():
                state = _load_form(schema_file, value_file)
                node = _locate(state, path)
                if not isinstance(node, PrimitiveEditor):
                    raise SchemaFormError(f"'{path}' is a {node.kind.value} field, set only applies to scalars")
                node.input(text)
                _emit_result(state, value_file, write)

        @self.command("unset")
        def unset_value(
            schema_file: Path = typer.Argument(..., help="Schema 文件（JSON/YAML）"),
            value_file: Path = typer.Argument(..., help="值文件（JSON/YAML）"),
            path: str = typer.Argument(..., help="字段路径"),
            write: bool = typer.Option(False, "--write", "-w", help="写回值文件"),
        ) -> None:
            """清除字段值（从所属对象中移除该属性）。"""
            with _cli_errors():
                state = _load_form(schema_file, value_file)
                if not path:
                    raise SchemaFormError("Cannot unset the root value")
                _locate(state, path).change(None)
                _emit_result(state, value_file, write)

    def _register_array_commands(self) -> None:
        """注册 append 和 remove 命令。"""

        def _array_at(state: FormState, path: str) -> ArrayEditor:
            node = _locate(state, path)
            if not isinstance(node, ArrayEditor):
                raise SchemaFormError(f"'{path or '<root>'}' is not an array field")
            return node

        @self.command()
        def append(
            schema_file: Path = typer.Argument(..., help="Schema 文件（JSON/YAML）"),
            value_file: Path = typer.Argument(..., help="值文件（JSON/YAML）"),
            path: str = typer.Argument(..., help="数组字段路径"),
            write: bool = typer.Option(False, "--write", "-w", help="写回值文件"),
        ) -> None:
            """向数组追加一个按 items 合成的默认元素。"""
            with _cli_errors():
                state = _load_form(schema_file, value_file)
                _array_at(state, path).append()
                _emit_result(state, value_file, write)

        @self.command()
        def remove(
            schema_file: Path = typer.Argument(..., help="Schema 文件（JSON/YAML）"),
            value_file: Path = typer.Argument(..., help="值文件（JSON/YAML）"),
            path: str = typer.Argument(..., help="数组字段路径"),
            index: int = typer.Argument(..., help="要删除的元素索引"),
            write: bool = typer.Option(False, "--write", "-w", help="写回值文件"),
        ) -> None:
            """删除数组中的一个元素，后续元素依次前移。"""
            with _cli_errors():
                state = _load_form(schema_file, value_file)
                _array_at(state, path).remove(index)
                _emit_result(state, value_file, write)

    def _register_remote_commands(self) -> None:
        """注册访问配置 API 的命令。"""
        self._register_modules_command()
        self._register_show_command()
        self._register_save_command()
        self._register_reset_command()

    def _register_modules_command(self) -> None:
        """注册 modules 命令。"""

        @self.command()
        def modules(
            scope: str | None = typer.Option(None, "--scope", help="按作用域过滤：tenant 或 subscription"),
        ) -> None:
            """列出可配置模块。"""
            with _cli_errors():
                grouped = get_api_client().list_modules_by_scope()
                if scope is not None and scope not in grouped:
                    raise SchemaFormError(f"scope must be one of: {list(grouped)}")
            table = Table("Path", "Name", "Scope", "Description")
            for module_scope, items in grouped.items():
                if scope is not None and module_scope != scope:
                    continue
                for module in items:
                    table.add_row(module.path, module.name, module.scope, module.description or "")
            console.print(table)

    def _register_show_command(self) -> None:
        """注册 show 命令。"""

        @self.command()
        def show(
            tenant_id: str = typer.Argument(..., help="租户 ID"),
            module_path: str = typer.Argument(..., help="模块路径"),
            subscription_id: str | None = typer.Option(None, "--subscription", "-s", help="订阅 ID"),
            expand_all: bool = typer.Option(False, "--expand-all", "-e", help="展开所有区块"),
        ) -> None:
            """显示租户或订阅下的模块配置。"""
            with _cli_errors():
                session = ModuleEditorSession(get_api_client(), tenant_id, module_path, subscription_id)
                state = session.load()
            module = session.module
            title = f"Configure: {module.name if module else module_path}"
            status = "[green]Custom configuration[/green]" if session.has_override else "[dim]Using defaults[/dim]"
            console.print(f"[bold]{escape(title)}[/bold]  /{escape(module_path)}")
            if module and module.description:
                console.print(module.description, highlight=False)
            console.print(f"{escape(session.context_label)}  {status}")
            console.print(build_tree(state.tree, title=module_path, expand_all=expand_all))

    def _register_save_command(self) -> None:
        """注册 save 命令。"""

        @self.command()
        def save(
            tenant_id: str = typer.Argument(..., help="租户 ID"),
            module_path: str = typer.Argument(..., help="模块路径"),
            value_file: Path = typer.Argument(..., help="新配置文件（JSON/YAML）"),
            subscription_id: str | None = typer.Option(None, "--subscription", "-s", help="订阅 ID"),
        ) -> None:
            """提交新的覆盖配置。

            文件内容作为根值提交，原样作为配置载荷保存。
            """
            with _cli_errors():
                value = load_document(value_file)
                session = ModuleEditorSession(get_api_client(), tenant_id, module_path, subscription_id)
                session.load().tree.change(value)
                session.save()
            typer.echo("Configuration saved successfully")

    def _register_reset_command(self) -> None:
        """注册 reset 命令。"""

        @self.command()
        def reset(
            tenant_id: str = typer.Argument(..., help="租户 ID"),
            module_path: str = typer.Argument(..., help="模块路径"),
            subscription_id: str | None = typer.Option(None, "--subscription", "-s", help="订阅 ID"),
            yes: bool = typer.Option(False, "--yes", "-y", help="跳过确认"),
        ) -> None:
            """删除覆盖配置，恢复为默认值。"""
            if not yes:
                typer.confirm(
                    "Remove the custom configuration and reset this module to defaults?",
                    abort=True,
                )
            with _cli_errors():
                session = ModuleEditorSession(get_api_client(), tenant_id, module_path, subscription_id)
                session.load()
                removed = session.reset()
            typer.echo("Configuration reset to defaults" if removed else "Already using defaults")
