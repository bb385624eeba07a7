"""
CLI命令定义（argparse）
"""
import argparse


def create_parser() -> argparse.ArgumentParser:
    """
    创建命令行参数解析器

    Returns:
        ArgumentParser 实例
    """
    parser = argparse.ArgumentParser(
        prog='spider.py',
        description='图集爬虫：下载列表页、相册页中的全部图片',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
示例:
  # 从默认列表页开始爬取
  python spider.py

  # 从指定页面开始（列表页或相册页）
  python spider.py "http://www.meizitu.com/a/list_1_2.html"
  python spider.py "http://www.meizitu.com/a/5432.html" --log-level DEBUG
        '''
    )

    parser.add_argument('url', type=str, nargs='?', default=None,
                        help='起始页面 URL（默认：配置中的第一页列表）')
    parser.add_argument('--log-level', type=str, default=None,
                        choices=['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR'],
                        help='控制台日志级别')
    parser.add_argument('--max-download-workers', type=int, default=None,
                        help='每个工作进程的图片下载并发数')
    parser.add_argument('--download-timeout', type=float, default=None,
                        help='单张图片下载超时（秒）')

    return parser
