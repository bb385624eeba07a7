"""
图片下载器模块
"""
import aiohttp
import asyncio
import os
from typing import Optional, Dict, Any, Tuple
from urllib.parse import urlparse
from loguru import logger

from config import Config
from core.storage import ContentStore

# 超时的下载记为此状态码
TIMEOUT_STATUS = -1


def image_extension(url: str) -> str:
    """从URL路径提取扩展名（不含查询参数）"""
    return os.path.splitext(urlparse(url).path)[1]


class ImageDownloader:
    """
    图片下载器

    每张图片只请求一次：
    - 超时（硬超时，默认2分钟）记为状态码 -1
    - 非200状态码记录日志后返回
    - 网络错误记录日志后返回
    以上情况都不会抛出异常，也不会重试。
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        store: ContentStore,
        config: Config,
        log=None,
        headers: Optional[Dict[str, str]] = None
    ):
        """
        Args:
            session: 共享的HTTP会话
            store: 内容寻址存储
            config: 配置对象
            log: 日志上下文
            headers: 额外请求头
        """
        self.session = session
        self.store = store
        self.timeout = config.crawler.download_timeout
        self.headers = headers
        self.log = log or logger
        self.download_stats = {
            "total": 0,
            "success": 0,
            "failed": 0,
            "duplicates": 0,
            "timeouts": 0
        }

    async def _fetch_bytes(self, url: str) -> Tuple[int, bytes]:
        """请求图片，返回 (状态码, 原始字节)"""
        async with self.session.get(url, headers=self.headers) as response:
            if response.status != 200:
                return response.status, b""
            return response.status, await response.read()

    async def download(self, url: str) -> Dict[str, Any]:
        """
        下载单张图片并保存

        Args:
            url: 图片URL

        Returns:
            下载结果字典
        """
        self.download_stats["total"] += 1
        self.log.debug("will download image {}", url)
        loop = asyncio.get_running_loop()
        started = loop.time()

        try:
            status, data = await asyncio.wait_for(self._fetch_bytes(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.download_stats["timeouts"] += 1
            self.download_stats["failed"] += 1
            self.log.warning("fetch image {} failed[{}]", url, int((loop.time() - started) * 1000))
            return {"success": False, "url": url, "status": TIMEOUT_STATUS}
        except (aiohttp.ClientError, OSError) as e:
            self.download_stats["failed"] += 1
            self.log.error("fetch image {} has error: {}", url, e)
            return {"success": False, "url": url, "status": None, "error": str(e)}

        if status != 200:
            self.download_stats["failed"] += 1
            self.log.warning("download image {} response status code: {}", url, status)
            return {"success": False, "url": url, "status": status}

        try:
            save_path, created = self.store.save(data, image_extension(url))
        except OSError as e:
            self.download_stats["failed"] += 1
            self.log.error("save image {} failed: {}", url, e)
            return {"success": False, "url": url, "status": status, "error": str(e)}

        if created:
            self.download_stats["success"] += 1
        else:
            self.download_stats["duplicates"] += 1
            self.log.info("file exists {}", url)

        self.log.debug("download image {} completed[{}]", url, int((loop.time() - started) * 1000))
        return {
            "success": True,
            "url": url,
            "status": status,
            "save_path": str(save_path),
            "file_size": len(data),
            "duplicate": not created
        }

    def get_stats(self) -> Dict[str, int]:
        """获取下载统计"""
        return self.download_stats.copy()
