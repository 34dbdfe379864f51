"""异常定义模块。

本模块定义了 SchemaForm 项目中使用的所有自定义异常类，
采用层级化设计便于异常捕获和处理。

表单引擎本身在渲染过程中不抛出异常：不完整的 Schema 会降级处理，
这里的异常只用于配置加载、路径寻址和 API 调用等边界场景。
"""

from typing import Any


class SchemaFormError(Exception):
    """SchemaForm 基础异常类。

    所有 SchemaForm 自定义异常的基类，可用于统一捕获所有项目异常。
    """

    pass


class ConfigurationError(SchemaFormError):
    """配置相关异常。

    当配置项缺失、格式错误或验证失败时抛出。
    """

    pass


class SchemaError(SchemaFormError):
    """Schema 文档异常。

    当 Schema 文档完全无法解析（例如不是对象）时抛出。
    """

    pass


class EditPathError(SchemaFormError):
    """编辑路径异常。

    当编辑路径无法定位到编辑器节点或值时抛出。
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid path '{path}': {reason}")


class ApiError(SchemaFormError):
    """配置 API 调用异常。

    status 为 0 表示请求未到达服务端（网络错误、超时等）。
    """

    def __init__(self, message: str, status: int = 0, data: Any = None):
        self.status = status
        self.data = data
        super().__init__(message)

    @property
    def code(self) -> str | None:
        """服务端返回的错误码。"""
        if isinstance(self.data, dict):
            code = self.data.get("code")
            return code if isinstance(code, str) else None
        return None

    @property
    def is_not_found(self) -> bool:
        """是否为 404 响应。"""
        return self.status == 404
