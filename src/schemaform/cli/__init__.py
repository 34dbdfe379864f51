"""CLI 工具模块。

提供基于 typer 的命令行工具实现，
将表单引擎和配置会话暴露为 CLI 命令。

使用方式：
    ```bash
    # 渲染本地 Schema 和值
    schemaform render schema.json --value value.json

    # 设置字段并写回
    schemaform set schema.json value.json limits.maxConnections 100 -w

    # 查看租户下的模块配置
    schemaform -c config.yaml show contoso network/firewall
    ```
"""

from schemaform.cli.form_typer import FormTyper

__all__ = ["FormTyper", "app", "main"]

app = FormTyper()


def main() -> None:
    """CLI 入口函数。

    用于 pyproject.toml 中的 project.scripts 注册。
    """
    app()
