"""
解析器基类模块

包含解析器的抽象基类：
- BaseParser: 解析器基类
"""
from abc import ABC
from typing import List, Optional
from urllib.parse import urljoin
from bs4 import BeautifulSoup


class BaseParser(ABC):
    """
    解析器基类

    所有解析器的公共基类，提供：
    - 按选择器提取图片 / 链接
    - 相对路径处理
    """

    def __init__(self, parser_config=None):
        """
        初始化解析器

        Args:
            parser_config: 配置对象，可选
        """
        self._config = parser_config

    def _extract_images_from_soup(
        self,
        soup: BeautifulSoup,
        selectors: List[str],
        base_url: str
    ) -> List[str]:
        """
        从HTML中提取图片URL

        Args:
            soup: BeautifulSoup对象
            selectors: CSS选择器列表
            base_url: 基础URL（用于处理相对路径）

        Returns:
            图片URL列表（保持页面顺序）
        """
        images = []
        for selector in selectors:
            for img in soup.select(selector):
                src = self._get_image_url(img)
                if src:
                    # 处理相对路径
                    if not src.startswith('http'):
                        src = urljoin(base_url, src)
                    images.append(src)
        return images

    def _extract_links_from_soup(self, soup: BeautifulSoup, selector: str) -> List[str]:
        """提取匹配节点的 href（跳过空链接）"""
        links = []
        for a in soup.select(selector):
            href = (a.get('href') or '').strip()
            if href:
                links.append(href)
        return links

    def _get_image_url(self, img_tag) -> Optional[str]:
        """
        从img标签获取图片URL

        Args:
            img_tag: BeautifulSoup img标签

        Returns:
            图片URL，如果无法获取返回None
        """
        src = (img_tag.get('src') or '').strip()
        return src or None
