"""
解析器模块

包含页面解析器：
- BaseParser: 解析器基类
- GalleryParser: 图集站点解析器
"""
from parsers.base import BaseParser
from parsers.gallery_parser import GalleryParser, PageLinks, normalize_page_url

__all__ = ['BaseParser', 'GalleryParser', 'PageLinks', 'normalize_page_url']
