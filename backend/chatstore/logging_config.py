"""
日志配置
所有模块使用 logging.getLogger(__name__)，消息以 [组件名] 作为前缀
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    为 chatstore 日志层级配置 stdout 输出

    重复调用不会叠加 handler

    Args:
        level: 日志级别名称（如 "INFO"、"DEBUG"）

    Returns:
        chatstore 根 logger
    """
    logger = logging.getLogger("chatstore")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not any(getattr(h, "_chatstore_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._chatstore_handler = True
        logger.addHandler(handler)

    logger.debug("[Logging] 日志已初始化: level=%s", level)
    return logger
