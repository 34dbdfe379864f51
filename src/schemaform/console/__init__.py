"""控制台模块。

本模块提供模块配置的编辑会话以及可编辑树的终端渲染。
"""

from schemaform.console.render import build_tree
from schemaform.console.session import ModuleEditorSession, clean_schema, describe_error

__all__ = ["ModuleEditorSession", "build_tree", "clean_schema", "describe_error"]
