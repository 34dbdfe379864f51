"""配置 API 模块。

本模块封装多租户配置服务的 HTTP 接口及其响应模型。
"""

from schemaform.api.client import ApiClient
from schemaform.api.models import (
    ConfigSources,
    Module,
    ModuleConfigData,
    ModuleStatus,
    Subscription,
)

__all__ = [
    "ApiClient",
    "Module",
    "ModuleConfigData",
    "ConfigSources",
    "ModuleStatus",
    "Subscription",
]
