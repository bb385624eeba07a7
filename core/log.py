"""
日志上下文模块

每个工作进程按本次爬取的 URL 建立独立的日志文件，
并返回绑定了该 URL 的 logger，由调用方显式传给各组件。
"""
import re
import sys
from pathlib import Path
from loguru import logger

from config import LogConfig

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{process}</cyan> | <level>{message}</level>"
)

# 路径分隔符以及文件名中不允许出现的字符
_UNSAFE_CHARS = re.compile(r'[/\\:*?"<>|]')


def sanitize_log_name(url: str) -> str:
    """将URL转换为可用作目录名的字符串"""
    name = _UNSAFE_CHARS.sub("_", url).strip(". ")
    return name or "default"


def get_log_path(url: str, log_config: LogConfig) -> Path:
    """本次爬取对应的日志文件路径: logs/<url>/crawler.log"""
    return Path(log_config.log_dir) / sanitize_log_name(url) / log_config.log_file


def setup_logging(url: str, log_config: LogConfig):
    """
    配置日志输出

    Args:
        url: 本进程负责的页面URL
        log_config: 日志配置

    Returns:
        绑定了 task_url 的 logger
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=log_config.log_level,
        colorize=True,
    )

    log_file = get_log_path(url, log_config)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        rotation=log_config.rotation,
        retention=log_config.retention,
        encoding="utf-8",
        level="DEBUG",
        filter=lambda record: record["extra"].get("task_url") == url,
    )

    return logger.bind(task_url=url)
