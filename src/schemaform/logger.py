"""日志配置模块。

控制台日志统一经由 Rich 写到标准错误，与命令写到标准输出的
JSON 结果和渲染树分开。
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str = "INFO") -> None:
    """配置控制台日志。

    HTTP 客户端库只保留 WARNING 及以上的日志。DEBUG 级别下额外显示
    时间和来源位置，便于排查 API 调用。

    Args:
        level: 日志级别，可选值：DEBUG、INFO、WARNING、ERROR、CRITICAL。
    """
    debug = level == "DEBUG"
    # 日志消息中包含 rules[0] 这样的路径，不能按 Rich 标记解析
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=debug,
        show_path=debug,
    )
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler])
    logger.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


logger = logging.getLogger("schemaform")
