"""
图集爬虫入口

每次运行处理一个页面；发现的相册页和分页由子进程再次运行本脚本处理。
"""
import asyncio
import sys

from cli.commands import create_parser
from cli.handlers import handle_crawl


def main(argv=None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    return asyncio.run(handle_crawl(args))


if __name__ == "__main__":
    sys.exit(main())
