"""
页面获取模块

获取列表页 / 相册页的HTML并解析为 BeautifulSoup 对象。
等待响应期间由看门狗定时输出耗时日志（只记录，不取消请求）。
"""
import asyncio
import contextlib
import time
from typing import Optional, Dict
import aiohttp
from bs4 import BeautifulSoup
from loguru import logger

from config import Config
from core.errors import NetworkError


class PageFetcher:
    """页面获取器"""

    def __init__(self, session: aiohttp.ClientSession, config: Config, log=None):
        """
        Args:
            session: 共享的HTTP会话
            config: 配置对象
            log: 日志上下文
        """
        self.session = session
        self.encoding = config.site.encoding
        self.watchdog_interval = config.crawler.fetch_watchdog_interval
        self.log = log or logger

    async def _watchdog(self, url: str, started: float):
        """定时输出获取耗时"""
        while True:
            await asyncio.sleep(self.watchdog_interval)
            elapsed = int((time.monotonic() - started) * 1000)
            self.log.warning("fetch url {} running[{}]", url, elapsed)

    async def fetch_text(self, url: str, headers: Optional[Dict[str, str]] = None) -> str:
        """
        获取页面文本

        Raises:
            NetworkError: 传输层出错
        """
        self.log.debug("async fetch url {}", url)
        started = time.monotonic()
        watchdog = asyncio.create_task(self._watchdog(url, started))
        try:
            async with self.session.get(url, headers=headers) as response:
                if response.status != 200:
                    self.log.warning("fetch url {} response status code: {}", url, response.status)
                html = await response.text(encoding=self.encoding, errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            self.log.error("fetch url {} failed: {}", url, e)
            raise NetworkError(url, e) from e
        finally:
            watchdog.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await watchdog

        self.log.debug("fetch url {} completed[{}]", url, int((time.monotonic() - started) * 1000))
        return html

    async def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> BeautifulSoup:
        """获取页面并解析"""
        html = await self.fetch_text(url, headers=headers)
        return BeautifulSoup(html, "lxml")
