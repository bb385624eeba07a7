"""
配置管理模块 - 图集爬虫
统一配置管理，支持通过环境变量 / .env 覆盖
"""
from pydantic import BaseModel, Field
from typing import Dict, Optional
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# 项目根目录
BASE_DIR = Path(__file__).parent


class SiteConfig(BaseModel):
    """目标站点配置"""
    name: str = Field(default="meizitu", description="站点名称")
    base_url: str = Field(default="http://www.meizitu.com", description="站点基础URL")
    listing_path: str = Field(default="/a/", description="列表页所在路径")
    start_page: str = Field(default="list_1_1.html", description="默认起始列表页")
    encoding: Optional[str] = Field(default="gbk", description="页面编码，None 表示使用响应声明的编码")

    # 选择器配置（站点页面结构固定）
    image_selector: str = Field(default="#maincontent #picture p img", description="图片选择器")
    album_selector: str = Field(default=".wp-item .con .pic a", description="相册链接选择器")
    pagination_selector: str = Field(default="#wp_page_numbers ul li a", description="分页链接选择器")
    current_page_selector: str = Field(default=".thisclass", description="当前页码选择器")


class CrawlerConfig(BaseModel):
    """爬虫配置"""
    fetch_watchdog_interval: float = Field(default=60.0, description="页面获取看门狗日志间隔（秒）")
    download_timeout: float = Field(default=120.0, description="单张图片下载硬超时（秒）")
    page_timeout: Optional[float] = Field(default=None, description="页面获取超时（秒），None 表示不限制")
    max_download_workers: int = Field(default=8, description="每个工作进程的图片下载并发数")
    rotate_user_agent: bool = Field(default=False, description="是否发送随机UA")


class ImageConfig(BaseModel):
    """图片配置"""
    download_dir: Path = Field(default=BASE_DIR / "downloads", description="下载目录")


class LogConfig(BaseModel):
    """日志配置"""
    log_level: str = Field(default="INFO", description="日志级别")
    log_dir: Path = Field(default=BASE_DIR / "logs", description="日志目录")
    log_file: str = Field(default="crawler.log", description="日志文件名")
    rotation: str = Field(default="100 MB", description="日志轮转大小")
    retention: str = Field(default="30 days", description="日志保留时间")


class Config(BaseModel):
    """全局配置"""
    site: SiteConfig = Field(default_factory=SiteConfig)
    crawler: CrawlerConfig = Field(default_factory=CrawlerConfig)
    image: ImageConfig = Field(default_factory=ImageConfig)
    log: LogConfig = Field(default_factory=LogConfig)

    def __init__(self, **data):
        super().__init__(**data)
        # 创建必要的目录
        self._create_directories()

    def _create_directories(self):
        """创建必要的目录"""
        self.image.download_dir.mkdir(parents=True, exist_ok=True)
        self.log.log_dir.mkdir(parents=True, exist_ok=True)

    @property
    def start_url(self) -> str:
        """默认起始列表页URL"""
        listing = "/" + self.site.listing_path.strip("/") + "/"
        return f"{self.site.base_url.rstrip('/')}{listing}{self.site.start_page}"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# 从环境变量加载配置
def load_config_from_env() -> Config:
    """
    从环境变量加载配置

    子进程继承父进程的环境变量，因此同一次爬取的所有工作进程使用相同配置。
    """
    site = {}
    if os.getenv("SITE_BASE_URL"):
        site["base_url"] = os.getenv("SITE_BASE_URL")
    if os.getenv("SITE_ENCODING") is not None:
        # 空字符串表示交给响应头决定编码
        site["encoding"] = os.getenv("SITE_ENCODING") or None

    image = {}
    if os.getenv("DOWNLOAD_DIR"):
        image["download_dir"] = Path(os.getenv("DOWNLOAD_DIR"))

    log = {"log_level": os.getenv("LOG_LEVEL", "INFO")}
    if os.getenv("LOG_DIR"):
        log["log_dir"] = Path(os.getenv("LOG_DIR"))

    config_data = {
        "site": site,
        "crawler": {
            "fetch_watchdog_interval": float(os.getenv("FETCH_WATCHDOG_INTERVAL", "60")),
            "download_timeout": float(os.getenv("DOWNLOAD_TIMEOUT", "120")),
            "max_download_workers": int(os.getenv("MAX_DOWNLOAD_WORKERS", "8")),
            "rotate_user_agent": _env_bool("ROTATE_USER_AGENT"),
        },
        "image": image,
        "log": log,
    }
    return Config(**config_data)


def config_to_env(config: Config) -> Dict[str, str]:
    """
    将配置转换为环境变量（load_config_from_env 的逆操作）

    用于启动工作进程，使命令行覆盖项也传递给子进程。
    """
    return {
        "SITE_BASE_URL": config.site.base_url,
        "SITE_ENCODING": config.site.encoding or "",
        "DOWNLOAD_DIR": str(config.image.download_dir),
        "LOG_LEVEL": config.log.log_level,
        "LOG_DIR": str(config.log.log_dir),
        "FETCH_WATCHDOG_INTERVAL": str(config.crawler.fetch_watchdog_interval),
        "DOWNLOAD_TIMEOUT": str(config.crawler.download_timeout),
        "MAX_DOWNLOAD_WORKERS": str(config.crawler.max_download_workers),
        "ROTATE_USER_AGENT": "true" if config.crawler.rotate_user_agent else "false",
    }


# 全局配置实例（默认从环境变量加载）
config = load_config_from_env()
