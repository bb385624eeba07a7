"""
CLI命令处理函数
"""
from config import Config, load_config_from_env
from core.errors import NetworkError
from core.log import setup_logging
from spiders.gallery_spider import GallerySpider


def build_config(args) -> Config:
    """加载配置并应用命令行覆盖项"""
    config = load_config_from_env()
    if args.log_level:
        config.log.log_level = args.log_level
    if args.max_download_workers:
        config.crawler.max_download_workers = args.max_download_workers
    if args.download_timeout:
        config.crawler.download_timeout = args.download_timeout
    return config


async def handle_crawl(args) -> int:
    """
    处理一个页面（当前进程即一个工作进程）

    Returns:
        进程退出码：0 完成，1 页面获取失败
    """
    config = build_config(args)
    url = args.url or config.start_url
    log = setup_logging(url, config.log)

    async with GallerySpider(config, log=log) as spider:
        try:
            await spider.crawl_page(url)
        except NetworkError as e:
            log.error("page {} aborted: {}", url, e)
            return 1

    log.success("page {} completed", url)
    return 0
