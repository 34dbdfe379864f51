"""测试配置和共享 fixtures。"""

import copy

import httpx
import orjson
import pytest

from schemaform.api.client import ApiClient
from schemaform.config import AppContext

API_BASE = "http://testserver/api/v1"


class FakeConfigApi:
    """内存中的配置 API，通过 httpx.MockTransport 挂到客户端上。

    合成配置为模块默认值与覆盖的浅合并，覆盖按
    (tenant_id, subscription_id, module_path) 存储。
    """

    def __init__(self, modules: list[dict], defaults: dict[str, dict]):
        self.modules = {module["path"]: module for module in modules}
        self.defaults = defaults
        self.overrides: dict[tuple[str, str | None, str], dict] = {}
        self.subscriptions = {"sub-prod": {"id": "sub-prod", "name": "Production"}}
        self.requests: list[httpx.Request] = []
        self.reject_saves = False

    @staticmethod
    def _json(status: int, data: object = None) -> httpx.Response:
        if data is None:
            return httpx.Response(status)
        return httpx.Response(status, content=orjson.dumps(data), headers={"Content-Type": "application/json"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.removeprefix("/api/v1").strip("/").split("/")
        if parts[0] == "modules":
            return self._modules(request, parts[1:])
        if parts[0] == "tenants" and len(parts) >= 3:
            tenant_id = parts[1]
            if parts[2] == "modules":
                return self._config(request, tenant_id, None, "/".join(parts[3:]))
            if parts[2] == "subscriptions" and len(parts) >= 4:
                subscription_id = parts[3]
                if len(parts) == 4:
                    subscription = self.subscriptions.get(subscription_id)
                    if subscription is None:
                        return self._json(404, {"detail": "Subscription not found"})
                    return self._json(200, subscription)
                if parts[4] == "modules":
                    return self._config(request, tenant_id, subscription_id, "/".join(parts[5:]))
        return self._json(404, {"detail": "Not found"})

    def _modules(self, request: httpx.Request, rest: list[str]) -> httpx.Response:
        if not rest:
            return self._json(200, {"modules": list(self.modules.values())})
        module_path = "/".join(rest)
        if module_path in self.modules:
            return self._json(200, self.modules[module_path])
        if rest[-1] == "schema" and "/".join(rest[:-1]) in self.modules:
            return self._json(200, self.modules["/".join(rest[:-1])].get("schema"))
        if rest[-1] == "default" and "/".join(rest[:-1]) in self.modules:
            return self._json(200, self.defaults["/".join(rest[:-1])])
        return self._json(404, {"detail": "Module not found"})

    def _config(
        self, request: httpx.Request, tenant_id: str, subscription_id: str | None, module_path: str
    ) -> httpx.Response:
        if module_path not in self.modules:
            return self._json(404, {"detail": "Module not found"})
        key = (tenant_id, subscription_id, module_path)
        if request.method == "GET":
            composed = copy.deepcopy(self.defaults[module_path])
            tenant_key = (tenant_id, None, module_path)
            if tenant_key in self.overrides:
                composed.update(self.overrides[tenant_key])
            if subscription_id and key in self.overrides:
                composed.update(self.overrides[key])
            sources = {"tenantOverride": tenant_key in self.overrides}
            if subscription_id:
                sources["subscriptionOverride"] = key in self.overrides
            return self._json(200, {"composed": composed, "sources": sources})
        if request.method == "PUT":
            if self.reject_saves:
                return self._json(
                    422,
                    {
                        "detail": "Configuration failed validation",
                        "code": "VALIDATION_ERROR",
                        "details": [
                            {"path": "limits.perMinute", "message": "must be >= 1"},
                            {"path": "owner", "message": "is required"},
                        ],
                    },
                )
            self.overrides[key] = orjson.loads(request.content)
            return self._json(204)
        if request.method == "DELETE":
            if key not in self.overrides:
                return self._json(404, {"detail": "No override configured"})
            del self.overrides[key]
            return self._json(204)
        return self._json(405, {"detail": "Method not allowed"})


@pytest.fixture
def firewall_schema():
    """示例模块 Schema。"""
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "$id": "https://config.example.com/modules/network/firewall.json",
        "type": "object",
        "title": "Firewall",
        "required": ["owner", "rules"],
        "properties": {
            "enabled": {"type": "boolean", "description": "Turn the firewall on"},
            "owner": {"type": "string"},
            "rules": {
                "type": "array",
                "items": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {
                        "name": {"type": "string"},
                        "port": {"type": "integer", "minimum": 1, "maximum": 65535},
                        "protocol": {"enum": ["tcp", "udp"]},
                    },
                },
            },
            "mode": {"type": "string", "enum": ["audit", "enforce"]},
            "maxConnections": {"type": "integer"},
            "limits": {
                "type": "object",
                "properties": {
                    "perMinute": {"type": "integer"},
                    "burst": {
                        "type": "object",
                        "properties": {
                            "size": {"type": "number"},
                            "window": {
                                "type": "object",
                                "properties": {"seconds": {"type": "integer"}},
                            },
                        },
                    },
                },
            },
            "notes": {"type": "string", "format": "textarea"},
            "tags": {"type": "array"},
        },
    }


@pytest.fixture
def firewall_value():
    """示例模块配置值。"""
    return {
        "enabled": True,
        "owner": "netops",
        "rules": [
            {"name": "http", "port": 80, "protocol": "tcp"},
            {"name": "https", "port": 443, "protocol": "tcp"},
            {"name": "dns", "port": 53, "protocol": "udp"},
        ],
        "mode": "audit",
        "limits": {"perMinute": 600, "burst": {"size": 1.5}},
        "tags": ["edge"],
        "_revision": 7,
    }


@pytest.fixture
def fake_api(firewall_schema, firewall_value):
    """内存配置 API。"""
    modules = [
        {
            "name": "Firewall",
            "path": "network/firewall",
            "scope": "subscription",
            "description": "Inbound traffic rules",
            "schema": firewall_schema,
        },
        {
            "name": "Billing",
            "path": "billing",
            "scope": "tenant",
            "schema": {"type": "object", "properties": {"currency": {"type": "string"}}},
        },
    ]
    defaults = {"network/firewall": firewall_value, "billing": {"currency": "EUR"}}
    return FakeConfigApi(modules, defaults)


@pytest.fixture
def api_client(fake_api):
    """挂接内存配置 API 的客户端。"""
    client = ApiClient(base_url=API_BASE, transport=httpx.MockTransport(fake_api.handler))
    yield client
    client.close()


@pytest.fixture
def app_context(tmp_path):
    """初始化应用上下文，测试结束后重置。"""
    try:
        yield AppContext.init(tmp_path / "config.yaml")
    finally:
        AppContext.reset()
