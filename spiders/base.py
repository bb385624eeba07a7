"""
爬虫基类模块

包含爬虫的抽象基类：
- BaseSpider: 爬虫基类
"""
import aiohttp
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional
from loguru import logger
from fake_useragent import UserAgent

from config import Config


class BaseSpider(ABC):
    """
    爬虫基类

    所有爬虫的公共基类，提供：
    - HTTP Session 管理
    - 请求头
    - 统计信息
    - 异步上下文管理

    子类需要实现:
    - get_statistics(): 获取统计信息
    """

    def __init__(self, config: Config, log=None):
        """
        初始化爬虫

        Args:
            config: 配置对象
            log: 日志上下文（默认使用全局 logger）
        """
        self.config = config
        self.log = log or logger
        self.session: Optional[aiohttp.ClientSession] = None
        self.ua = UserAgent() if config.crawler.rotate_user_agent else None

        # 基础统计信息
        self.stats = {
            'pages_fetched': 0,
            'requests_failed': 0,
        }

    async def __aenter__(self):
        """异步上下文管理器入口"""
        await self.init()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()

    async def init(self):
        """
        初始化爬虫

        子类应该调用 super().init() 并添加特定初始化逻辑
        """
        timeout = aiohttp.ClientTimeout(total=self.config.crawler.page_timeout)
        self.session = aiohttp.ClientSession(timeout=timeout)

    async def close(self):
        """
        关闭爬虫

        子类应该先执行特定清理逻辑，再调用 super().close()
        """
        if self.session:
            await self.session.close()
            self.session = None

        self.log.info("spider stats: {}", self.get_statistics())

    def get_headers(self) -> Optional[Dict[str, str]]:
        """
        获取请求头

        默认不附加任何请求头；启用 rotate_user_agent 时发送随机UA
        """
        if self.ua is None:
            return None
        return {"User-Agent": self.ua.random}

    @abstractmethod
    def get_statistics(self) -> Dict[str, Any]:
        """
        获取统计信息

        子类必须实现此方法
        """
        pass
