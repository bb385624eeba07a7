"""
图集爬虫模块

驱动单个页面的完整流程：
获取页面 -> 解析 -> 后台下载图片 -> 依次处理相册 -> （仅第1页）依次处理分页
"""
from typing import Dict, Any, Optional
from loguru import logger

from spiders.base import BaseSpider
from core.storage import ContentStore
from core.fetcher import PageFetcher
from core.downloader import ImageDownloader
from core.crawl_queue import DownloadQueue
from core.dispatcher import WorkerDispatcher
from parsers.gallery_parser import GalleryParser, PageLinks
from config import Config


class GallerySpider(BaseSpider):
    """
    图集站点爬虫

    每个工作进程处理一个页面：
    - 图片提交到下载队列，不阻塞页面处理
    - 相册页逐个交给独立工作进程，前一个结束后再启动下一个
    - 只有列表第1页才会为分页链接启动工作进程，避免各分页互相重复调度

    关闭时会先等待所有后台下载完成。
    """

    def __init__(
        self,
        config: Config,
        log=None,
        dispatcher: Optional[WorkerDispatcher] = None,
        parser: Optional[GalleryParser] = None
    ):
        """
        Args:
            config: 配置对象
            log: 日志上下文
            dispatcher: 工作进程调度器（默认启动子进程）
            parser: 页面解析器
        """
        super().__init__(config, log)
        self.parser = parser or GalleryParser(config)
        self.dispatcher = dispatcher or WorkerDispatcher(log=self.log, config=config)
        self.store = ContentStore(config.image.download_dir, log=self.log)
        self.fetcher: Optional[PageFetcher] = None
        self.downloader: Optional[ImageDownloader] = None
        self.download_queue: Optional[DownloadQueue] = None

        self.stats.update({
            "images_found": 0,
            "albums_dispatched": 0,
            "pages_dispatched": 0,
        })

    async def init(self):
        """初始化会话和下载组件"""
        await super().init()
        headers = self.get_headers()
        self.fetcher = PageFetcher(self.session, self.config, log=self.log)
        self.downloader = ImageDownloader(
            self.session, self.store, self.config, log=self.log, headers=headers
        )
        self.download_queue = DownloadQueue(
            self.downloader.download,
            max_workers=self.config.crawler.max_download_workers,
            log=self.log
        )

    async def close(self):
        """等待后台下载完成后关闭"""
        if self.download_queue:
            await self.download_queue.join()
        await super().close()

    async def crawl_page(self, url: str) -> PageLinks:
        """
        处理一个页面

        Args:
            url: 列表页或相册页URL

        Returns:
            页面提取结果

        Raises:
            NetworkError: 页面获取失败
        """
        self.log.info("crawl page {}", url)
        try:
            page = await self.fetcher.fetch(url, headers=self.get_headers())
        except Exception:
            self.stats['requests_failed'] += 1
            raise
        self.stats['pages_fetched'] += 1

        links = self.parser.extract(page, url)
        self.log.info(
            "page {}: images={}, albums={}, pages={}, current={}",
            url, len(links.images), len(links.albums),
            len(links.pagination_links), links.current_page
        )

        # 图片在后台下载
        for image_url in links.images:
            self.stats["images_found"] += 1
            self.download_queue.submit(image_url)

        # 相册逐个处理
        for album_url in links.albums:
            await self.dispatcher.dispatch(album_url)
            self.stats["albums_dispatched"] += 1

        # 只有第1页负责调度其余分页
        if links.current_page == 1:
            for href in links.pagination_links:
                next_url = self.parser.normalize(href)
                if next_url == url:
                    # 指向自身的链接会导致无限递归
                    self.log.debug("skip self link {}", href)
                    continue
                await self.dispatcher.dispatch(next_url)
                self.stats["pages_dispatched"] += 1

        return links

    def get_statistics(self) -> Dict[str, Any]:
        """获取统计信息"""
        stats = self.stats.copy()
        if self.downloader:
            stats["downloads"] = self.downloader.get_stats()
        stats["workers"] = self.dispatcher.get_stats()
        return stats
