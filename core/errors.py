"""
异常定义
"""
from typing import Optional


class SpiderError(Exception):
    """爬虫异常基类"""


class NetworkError(SpiderError):
    """页面获取时底层传输出错（不自动重试）"""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        message = f"failed to fetch {url}"
        if cause is not None:
            message = f"{message}: {cause!r}"
        super().__init__(message)
