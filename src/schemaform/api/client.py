"""配置 API 客户端模块。

本模块封装了多租户配置服务的 HTTP 接口，表单引擎之外的
读写都经由这里完成：
- 模块列表与模块 Schema
- 租户/订阅级别的模块配置读取、保存与重置
"""

from typing import Any, Self

import httpx

from schemaform.api.models import Module, ModuleConfigData, Scope, Subscription
from schemaform.constants import DEFAULT_API_BASE_URL, DEFAULT_API_TIMEOUT
from schemaform.exceptions import ApiError
from schemaform.logger import logger


class ApiClient:
    """配置 API 客户端。

    非 2xx 响应抛出带状态码的 ApiError，消息取自响应中的 detail；
    网络错误抛出 status 为 0 的 ApiError。

    Example:
        ```python
        with ApiClient("http://localhost:8000/api/v1") as client:
            module = client.get_module("network/firewall")
            config = client.get_tenant_module_config("contoso", module.path)
        ```
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = DEFAULT_API_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """初始化客户端。

        Args:
            base_url: API 根地址。
            timeout: 请求超时时间（秒）。
            transport: 自定义传输层（主要用于测试）。
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, endpoint: str, payload: Any = None) -> Any:
        """发送请求并解析 JSON 响应。

        Args:
            method: HTTP 方法。
            endpoint: 相对 base_url 的路径。
            payload: 请求体，None 表示不发送请求体。

        Returns:
            解析后的响应数据，空响应返回 None。

        Raises:
            ApiError: 请求失败或响应状态非 2xx 时抛出。
        """
        logger.debug(f"{method} {endpoint}")
        try:
            response = self._client.request(method, endpoint, json=payload)
        except httpx.HTTPError as e:
            raise ApiError(str(e) or "Network error", 0) from e

        data: Any = None
        if response.content:
            try:
                data = response.json()
            except ValueError:
                data = None

        if not response.is_success:
            detail = data.get("detail") if isinstance(data, dict) else None
            message = detail if isinstance(detail, str) and detail else "An error occurred"
            raise ApiError(message, response.status_code, data)
        return data

    # Modules

    def list_modules(self) -> list[Module]:
        data = self._request("GET", "/modules")
        return [Module.model_validate(item) for item in (data or {}).get("modules", [])]

    def list_modules_by_scope(self) -> dict[Scope, list[Module]]:
        """按作用域分组列出模块。"""
        grouped: dict[Scope, list[Module]] = {"tenant": [], "subscription": []}
        for module in self.list_modules():
            grouped[module.scope].append(module)
        return grouped

    def get_module(self, module_path: str) -> Module:
        return Module.model_validate(self._request("GET", f"/modules/{module_path}"))

    def get_module_schema(self, module_path: str) -> dict[str, Any]:
        return self._request("GET", f"/modules/{module_path}/schema") or {}

    def get_module_default(self, module_path: str) -> dict[str, Any]:
        return self._request("GET", f"/modules/{module_path}/default") or {}

    # Subscriptions

    def get_subscription(self, tenant_id: str, subscription_id: str) -> Subscription:
        data = self._request("GET", f"/tenants/{tenant_id}/subscriptions/{subscription_id}")
        return Subscription.model_validate(data)

    # Tenant module configuration

    def get_tenant_module_config(self, tenant_id: str, module_path: str) -> ModuleConfigData:
        data = self._request("GET", f"/tenants/{tenant_id}/modules/{module_path}")
        return ModuleConfigData.model_validate(data)

    def set_tenant_module_config(self, tenant_id: str, module_path: str, config: dict[str, Any]) -> None:
        self._request("PUT", f"/tenants/{tenant_id}/modules/{module_path}", config)

    def delete_tenant_module_config(self, tenant_id: str, module_path: str) -> None:
        self._request("DELETE", f"/tenants/{tenant_id}/modules/{module_path}")

    # Subscription module configuration

    def get_subscription_module_config(
        self, tenant_id: str, subscription_id: str, module_path: str
    ) -> ModuleConfigData:
        data = self._request(
            "GET", f"/tenants/{tenant_id}/subscriptions/{subscription_id}/modules/{module_path}"
        )
        return ModuleConfigData.model_validate(data)

    def set_subscription_module_config(
        self, tenant_id: str, subscription_id: str, module_path: str, config: dict[str, Any]
    ) -> None:
        self._request(
            "PUT",
            f"/tenants/{tenant_id}/subscriptions/{subscription_id}/modules/{module_path}",
            config,
        )

    def delete_subscription_module_config(
        self, tenant_id: str, subscription_id: str, module_path: str
    ) -> None:
        self._request(
            "DELETE", f"/tenants/{tenant_id}/subscriptions/{subscription_id}/modules/{module_path}"
        )
