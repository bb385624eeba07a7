"""
图集站点页面解析器

从列表页 / 相册页中提取：
- 图片链接
- 相册链接
- 分页链接
- 当前页码
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urljoin, urlparse
from bs4 import BeautifulSoup

from parsers.base import BaseParser
from config import config as global_config


@dataclass
class PageLinks:
    """单个页面的提取结果"""
    images: List[str] = field(default_factory=list)
    albums: List[str] = field(default_factory=list)
    pagination_links: List[str] = field(default_factory=list)
    current_page: Optional[int] = None


def normalize_page_url(href: str, base_url: str, listing_path: str = "/a/") -> str:
    """
    规范化分页链接

    - 完整URL原样返回
    - 绝对路径（/a/list_1_3.html）只拼接站点根地址
    - 其余（list_1_3.html）拼接到列表路径下

    Examples:
        >>> normalize_page_url("list_1_3.html", "http://site")
        'http://site/a/list_1_3.html'
        >>> normalize_page_url("/a/list_1_3.html", "http://site")
        'http://site/a/list_1_3.html'
    """
    href = href.strip()
    if urlparse(href).scheme:
        return href
    base = base_url.rstrip("/")
    if href.startswith("/"):
        return base + href
    listing = "/" + listing_path.strip("/") + "/" if listing_path.strip("/") else "/"
    return base + listing + href


class GalleryParser(BaseParser):
    """
    图集页面解析器

    纯提取逻辑，不做任何I/O；字段缺失时返回空列表 / None。
    """

    def __init__(self, parser_config=None):
        """
        Args:
            parser_config: 配置对象，可选。如果不提供则使用全局config
        """
        super().__init__(parser_config)
        self.config = (parser_config.site if parser_config else None) or global_config.site

    def extract(self, soup: BeautifulSoup, page_url: str) -> PageLinks:
        """
        解析页面

        Args:
            soup: 已解析的页面
            page_url: 页面URL（用于处理图片的相对路径）

        Returns:
            PageLinks
        """
        return PageLinks(
            images=self._extract_images_from_soup(soup, [self.config.image_selector], page_url),
            albums=self.extract_albums(soup),
            pagination_links=self._extract_links_from_soup(soup, self.config.pagination_selector),
            current_page=self.extract_current_page(soup),
        )

    def extract_albums(self, soup: BeautifulSoup) -> List[str]:
        """相册链接（相对链接按站点根地址补全）"""
        base = self.config.base_url.rstrip("/") + "/"
        return [
            urljoin(base, href)
            for href in self._extract_links_from_soup(soup, self.config.album_selector)
        ]

    def extract_current_page(self, soup: BeautifulSoup) -> Optional[int]:
        """当前页码，不存在或不是数字时返回 None"""
        element = soup.select_one(self.config.current_page_selector)
        if element is None:
            return None
        match = re.match(r"\d+", element.get_text(strip=True), re.ASCII)
        return int(match.group(0)) if match else None

    def normalize(self, href: str) -> str:
        """按本站配置规范化分页链接"""
        return normalize_page_url(href, self.config.base_url, self.config.listing_path)
