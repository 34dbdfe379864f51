"""配置管理模块。

本模块负责管理控制台的配置，包括：
- 配置 API 地址与超时
- 日志级别配置
- 应用上下文单例管理
"""

import threading
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from schemaform.api.client import ApiClient
from schemaform.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_API_BASE_URL,
    DEFAULT_API_TIMEOUT,
    DEFAULT_LOG_LEVEL,
    VALID_LOG_LEVELS,
)
from schemaform.exceptions import ConfigurationError


class ApiConfig(BaseModel):
    """配置 API 连接配置。

    Attributes:
        base_url: API 根地址，不含末尾斜杠。
        timeout: 请求超时时间（秒）。
    """

    base_url: str = DEFAULT_API_BASE_URL
    timeout: float = DEFAULT_API_TIMEOUT

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """验证 API 根地址。

        Args:
            v: 待验证的地址。

        Returns:
            去除末尾斜杠后的地址。

        Raises:
            ValueError: 地址为空时抛出。
        """
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("base_url required")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v


class ConsoleConfig(BaseModel):
    """控制台配置模型。

    Attributes:
        api: 配置 API 连接配置。
        log_level: 日志级别，默认为 INFO。
    """

    api: ApiConfig = Field(default_factory=ApiConfig)
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """验证日志级别。

        Args:
            v: 待验证的日志级别字符串。

        Returns:
            验证通过的大写日志级别。

        Raises:
            ValueError: 日志级别无效时抛出。
        """
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {sorted(VALID_LOG_LEVELS)}")
        return v_upper

    @classmethod
    def from_yaml(cls, config_path: Path) -> "ConsoleConfig":
        """从 YAML 配置文件加载控制台配置。

        Args:
            config_path: 配置文件路径，传入目录时读取其中的 config.yaml。

        Returns:
            加载的 ConsoleConfig 实例，若配置文件不存在则返回默认配置。

        Raises:
            ConfigurationError: 文件无法解析或配置项无效时抛出。
        """
        if config_path.is_dir():
            config_path = config_path / CONFIG_FILE_NAME
        if not config_path.exists():
            return cls()
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e


class AppContext:
    """应用上下文单例类。

    管理整个应用运行时的共享状态，包括配置和 API 客户端。
    采用单例模式确保全局唯一实例，使用线程锁保证线程安全。

    Attributes:
        config_path: 配置文件路径。
        config: 控制台配置实例。
    """

    _instance: "AppContext | None" = None
    _lock: threading.Lock = threading.Lock()

    def __init__(self, config_path: Path):
        """初始化应用上下文。

        Args:
            config_path: 配置文件路径。
        """
        self.config_path = config_path
        self.config = ConsoleConfig.from_yaml(config_path)
        self._api_client: ApiClient | None = None

    @property
    def api_client(self) -> ApiClient:
        """获取配置 API 客户端（懒加载）。

        Returns:
            ApiClient 实例。
        """
        if self._api_client is None:
            self._api_client = ApiClient(
                base_url=self.config.api.base_url,
                timeout=self.config.api.timeout,
            )
        return self._api_client

    @classmethod
    def get(cls) -> "AppContext":
        """获取应用上下文单例实例。

        Returns:
            AppContext 单例实例。

        Raises:
            RuntimeError: 若未初始化则抛出异常。
        """
        with cls._lock:
            if cls._instance is None:
                raise RuntimeError("AppContext not initialized. Call AppContext.init() first.")
            return cls._instance

    @classmethod
    def init(cls, config_path: Path) -> "AppContext":
        """初始化应用上下文单例。

        使用双重检查锁定模式确保线程安全。

        Args:
            config_path: 配置文件路径。

        Returns:
            新创建或已存在的 AppContext 实例。
        """
        if cls._instance is not None:
            return cls._instance

        with cls._lock:
            if cls._instance is None:
                cls._instance = AppContext(config_path)
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """重置应用上下文单例（主要用于测试）。"""
        with cls._lock:
            if cls._instance is not None and cls._instance._api_client is not None:
                cls._instance._api_client.close()
            cls._instance = None


def get_config() -> ConsoleConfig:
    """获取当前控制台配置。

    Returns:
        当前的 ConsoleConfig 实例。
    """
    return AppContext.get().config


def get_api_client() -> ApiClient:
    """获取配置 API 客户端。

    Returns:
        ApiClient 实例。
    """
    return AppContext.get().api_client
