"""
爬虫模块

包含爬虫类：
- BaseSpider: 爬虫基类
- GallerySpider: 图集站点爬虫
"""
from spiders.base import BaseSpider
from spiders.gallery_spider import GallerySpider

__all__ = [
    'BaseSpider',
    'GallerySpider',
]
