# config module tests
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from config import Config, SiteConfig, CrawlerConfig, load_config_from_env


class TestConfigDefaults(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def make(self, **data):
        data.setdefault("image", {"download_dir": Path(self.tmp) / "downloads"})
        data.setdefault("log", {"log_dir": Path(self.tmp) / "logs"})
        return Config(**data)

    def test_site_defaults(self):
        site = SiteConfig()
        self.assertEqual(site.base_url, "http://www.meizitu.com")
        self.assertEqual(site.encoding, "gbk")
        self.assertEqual(site.image_selector, "#maincontent #picture p img")

    def test_crawler_defaults(self):
        crawler = CrawlerConfig()
        self.assertEqual(crawler.fetch_watchdog_interval, 60.0)
        self.assertEqual(crawler.download_timeout, 120.0)
        self.assertIsNone(crawler.page_timeout)
        self.assertFalse(crawler.rotate_user_agent)

    def test_start_url(self):
        cfg = self.make()
        self.assertEqual(cfg.start_url, "http://www.meizitu.com/a/list_1_1.html")

    def test_start_url_custom_site(self):
        cfg = self.make(site={"base_url": "http://site/", "listing_path": "gallery", "start_page": "p1.html"})
        self.assertEqual(cfg.start_url, "http://site/gallery/p1.html")

    def test_creates_directories(self):
        cfg = self.make()
        self.assertTrue(cfg.image.download_dir.is_dir())
        self.assertTrue(cfg.log.log_dir.is_dir())


class TestLoadConfigFromEnv(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_env_overrides(self):
        env = {
            "SITE_BASE_URL": "http://mirror.site",
            "SITE_ENCODING": "utf-8",
            "DOWNLOAD_DIR": os.path.join(self.tmp, "dl"),
            "LOG_DIR": os.path.join(self.tmp, "lg"),
            "LOG_LEVEL": "DEBUG",
            "DOWNLOAD_TIMEOUT": "30",
            "MAX_DOWNLOAD_WORKERS": "2",
            "ROTATE_USER_AGENT": "true",
        }
        with patch.dict(os.environ, env):
            cfg = load_config_from_env()
        self.assertEqual(cfg.site.base_url, "http://mirror.site")
        self.assertEqual(cfg.site.encoding, "utf-8")
        self.assertEqual(cfg.image.download_dir, Path(self.tmp) / "dl")
        self.assertEqual(cfg.log.log_dir, Path(self.tmp) / "lg")
        self.assertEqual(cfg.log.log_level, "DEBUG")
        self.assertEqual(cfg.crawler.download_timeout, 30.0)
        self.assertEqual(cfg.crawler.max_download_workers, 2)
        self.assertTrue(cfg.crawler.rotate_user_agent)

    def test_empty_encoding_means_response_charset(self):
        env = {
            "SITE_ENCODING": "",
            "DOWNLOAD_DIR": os.path.join(self.tmp, "dl"),
            "LOG_DIR": os.path.join(self.tmp, "lg"),
        }
        with patch.dict(os.environ, env):
            cfg = load_config_from_env()
        self.assertIsNone(cfg.site.encoding)
