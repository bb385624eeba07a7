"""
核心模块

包含基础组件：
- storage: 内容寻址存储
- fetcher: 页面获取器
- downloader: 图片下载器
- crawl_queue: 后台下载队列
- dispatcher: 工作进程调度器
- log: 日志上下文
"""
from .errors import SpiderError, NetworkError
from .storage import ContentStore
from .fetcher import PageFetcher
from .downloader import ImageDownloader
from .crawl_queue import DownloadQueue
from .dispatcher import WorkerDispatcher

__all__ = [
    'SpiderError',
    'NetworkError',
    'ContentStore',
    'PageFetcher',
    'ImageDownloader',
    'DownloadQueue',
    'WorkerDispatcher',
]
