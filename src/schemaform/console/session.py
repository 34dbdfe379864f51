"""模块配置编辑会话模块。

本模块把配置 API 和表单引擎组合成一次编辑会话：
加载模块 Schema 与合成配置、编辑、保存覆盖、重置为默认值。
"""

from typing import Any

from schemaform.api.client import ApiClient
from schemaform.api.models import Module, ModuleConfigData, Scope, Subscription
from schemaform.constants import EMPTY_OBJECT_SCHEMA, SCHEMA_META_KEYS, VALIDATION_ERROR_CODE
from schemaform.exceptions import ApiError, SchemaFormError
from schemaform.form.engine import FormState
from schemaform.logger import logger


def clean_schema(schema: dict[str, Any] | None) -> dict[str, Any]:
    """去除文档级关键字，缺失时返回空对象 Schema。

    Args:
        schema: 模块 Schema。

    Returns:
        可直接交给表单引擎的 Schema 副本。
    """
    if not schema:
        return dict(EMPTY_OBJECT_SCHEMA)
    return {key: value for key, value in schema.items() if key not in SCHEMA_META_KEYS}


def describe_error(error: ApiError) -> str:
    """将 API 错误转换为面向用户的文本。

    校验错误会逐行列出 path: message。

    Args:
        error: API 错误。

    Returns:
        错误描述。
    """
    if error.code == VALIDATION_ERROR_CODE and isinstance(error.data, dict):
        details = error.data.get("details")
        if isinstance(details, list) and details:
            lines = [
                f"{detail.get('path')}: {detail.get('message')}"
                for detail in details
                if isinstance(detail, dict)
            ]
            if lines:
                return "Validation error: " + "\n".join(lines)
        return f"Validation error: {error}"
    return str(error)


class ModuleEditorSession:
    """模块配置编辑会话。

    对应租户（可选订阅）下的一个模块。load 之后通过 form 编辑，
    save 提交当前值，reset 删除覆盖并恢复为后端计算的默认值。

    Attributes:
        client: 配置 API 客户端。
        tenant_id: 租户 ID。
        module_path: 模块路径。
        subscription_id: 订阅 ID，为 None 时作用于租户级别。
        module: 已加载的模块信息。
        config: 已加载的合成配置。
        subscription: 已加载的订阅信息。
        form: 表单状态。
    """

    def __init__(
        self,
        client: ApiClient,
        tenant_id: str,
        module_path: str,
        subscription_id: str | None = None,
    ):
        self.client = client
        self.tenant_id = tenant_id
        self.module_path = module_path
        self.subscription_id = subscription_id
        self.module: Module | None = None
        self.config: ModuleConfigData | None = None
        self.subscription: Subscription | None = None
        self._form: FormState | None = None

    @property
    def scope(self) -> Scope:
        return "subscription" if self.subscription_id else "tenant"

    @property
    def form(self) -> FormState:
        """表单状态。

        Raises:
            SchemaFormError: 会话尚未加载时抛出。
        """
        if self._form is None:
            raise SchemaFormError("Session not loaded, call load() first")
        return self._form

    @property
    def has_override(self) -> bool:
        """当前作用域下是否存在自定义配置。"""
        if self.config is None:
            return False
        sources = self.config.sources
        return sources.subscription_override if self.subscription_id else sources.tenant_override

    @property
    def context_label(self) -> str:
        """会话上下文的展示文本。"""
        label = f"tenant {self.tenant_id}"
        if self.subscription_id:
            name = self.subscription.display_name if self.subscription else self.subscription_id
            label += f" / subscription {name}"
        return label

    def _fetch_config(self) -> ModuleConfigData:
        if self.subscription_id:
            return self.client.get_subscription_module_config(
                self.tenant_id, self.subscription_id, self.module_path
            )
        return self.client.get_tenant_module_config(self.tenant_id, self.module_path)

    def load(self) -> FormState:
        """加载模块信息和合成配置，构建表单状态。

        Returns:
            表单状态。

        Raises:
            ApiError: API 调用失败时抛出。
        """
        self.module = self.client.get_module(self.module_path)
        if self.subscription_id:
            self.subscription = self.client.get_subscription(self.tenant_id, self.subscription_id)
        self.config = self._fetch_config()
        self._form = FormState(clean_schema(self.module.json_schema), self.config.composed)
        logger.debug(f"Loaded {self.module_path} for {self.context_label}")
        return self._form

    def reload(self) -> None:
        """重新获取合成配置并替换表单值。"""
        self.config = self._fetch_config()
        self.form.replace(self.config.composed)

    def save(self) -> None:
        """提交当前值作为新的覆盖配置。

        Raises:
            ApiError: 保存失败时抛出，校验错误可用 describe_error 格式化。
        """
        value = self.form.value
        if self.subscription_id:
            self.client.set_subscription_module_config(
                self.tenant_id, self.subscription_id, self.module_path, value
            )
        else:
            self.client.set_tenant_module_config(self.tenant_id, self.module_path, value)
        logger.info(f"Configuration saved for {self.module_path} ({self.context_label})")
        self.reload()

    def reset(self) -> bool:
        """删除覆盖配置，恢复为默认值。

        Returns:
            是否删除了覆盖；服务端返回 404 时表示已经在使用默认值，返回 False。

        Raises:
            ApiError: 除 404 之外的失败时抛出。
        """
        try:
            if self.subscription_id:
                self.client.delete_subscription_module_config(
                    self.tenant_id, self.subscription_id, self.module_path
                )
            else:
                self.client.delete_tenant_module_config(self.tenant_id, self.module_path)
        except ApiError as e:
            if e.is_not_found:
                logger.info(f"{self.module_path} already uses defaults ({self.context_label})")
                return False
            raise
        logger.info(f"Configuration reset to defaults for {self.module_path} ({self.context_label})")
        self.reload()
        return True
