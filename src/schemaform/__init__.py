"""SchemaForm - 多租户配置系统的管理控制台。

本模块提供配置表单引擎及其周边能力，包括：
- 基于 Schema 的配置表单引擎
- 配置 API 客户端
- 模块配置编辑会话
- 命令行工具
"""

from importlib.metadata import version

__version__ = version("schemaform")
