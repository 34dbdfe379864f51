"""配置 API 响应模型定义模块。

本模块定义了配置 API 返回数据的 Pydantic 模型，包括：
- Module: 可配置模块及其 Schema
- ConfigSources: 配置来源标记（是否存在覆盖）
- ModuleConfigData: 模块的合成配置
- ModuleStatus: 租户/订阅下的模块配置状态
- Subscription: 订阅信息
"""

from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

Scope: TypeAlias = Literal["tenant", "subscription"]


class Module(BaseModel):
    """可配置模块。

    Attributes:
        name: 模块名称。
        path: 模块路径（可能包含斜杠），用于 URL。
        scope: 模块作用域，tenant 或 subscription。
        description: 模块说明。
        json_schema: 模块配置的 JSON Schema。
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    path: str
    scope: Scope
    description: str | None = None
    json_schema: dict[str, Any] | None = Field(default=None, alias="schema")


class ConfigSources(BaseModel):
    """配置来源标记，由后端计算，控制台只负责展示。"""

    model_config = ConfigDict(populate_by_name=True)

    tenant_override: bool = Field(default=False, alias="tenantOverride")
    subscription_override: bool = Field(default=False, alias="subscriptionOverride")


class ModuleConfigData(BaseModel):
    """模块的合成配置。

    Attributes:
        composed: 默认值与覆盖合成后的最终配置。
        sources: 配置来源标记。
    """

    composed: dict[str, Any] = Field(default_factory=dict)
    sources: ConfigSources = Field(default_factory=ConfigSources)


class ModuleStatus(BaseModel):
    """租户或订阅下的模块配置状态。"""

    model_config = ConfigDict(populate_by_name=True)

    has_override: bool = Field(default=False, alias="hasOverride")
    has_tenant_override: bool | None = Field(default=None, alias="hasTenantOverride")
    enabled: str | None = None
    description: str | None = None


class Subscription(BaseModel):
    """订阅信息。"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str | None = None
    metadata: dict[str, Any] | None = None
    configured_modules: dict[str, ModuleStatus] | None = Field(default=None, alias="configuredModules")

    @property
    def display_name(self) -> str:
        return self.name or self.id
