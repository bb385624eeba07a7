"""
工作进程调度模块

为每个发现的相册页 / 分页启动一个独立进程（同一入口 spider.py），
转发子进程的输出，并等待其退出。
"""
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional, List, Dict
from loguru import logger

from config import Config, config_to_env

# 工作进程入口脚本
ENTRY_SCRIPT = Path(__file__).resolve().parent.parent / "spider.py"


class WorkerDispatcher:
    """
    工作进程调度器

    子进程的 stderr 只作为日志转发，不视为失败；
    是否失败只看退出码（非0记录警告）。
    传入 config 时，子进程通过环境变量获得与父进程相同的配置（包括命令行覆盖项）。
    """

    def __init__(
        self,
        log=None,
        entry: Optional[Path] = None,
        python: Optional[str] = None,
        config: Optional[Config] = None
    ):
        """
        Args:
            log: 日志上下文
            entry: 入口脚本路径
            python: 解释器路径（默认当前解释器）
            config: 当前生效的配置，为空时子进程直接继承环境变量
        """
        self.log = log or logger
        self.config = config
        self.entry = Path(entry or ENTRY_SCRIPT)
        self.python = python or sys.executable
        self.stats = {
            "dispatched": 0,
            "succeeded": 0,
            "failed": 0,
        }

    def build_command(self, url: str) -> List[str]:
        return [self.python, str(self.entry), url]

    def build_env(self) -> Optional[Dict[str, str]]:
        """子进程环境变量：父进程环境 + 当前配置"""
        if self.config is None:
            return None
        env = dict(os.environ)
        env.update(config_to_env(self.config))
        return env

    @staticmethod
    async def _forward(stream: Optional[asyncio.StreamReader], target):
        """将子进程输出原样写入父进程对应的输出流"""
        if stream is None:
            return
        buffer = getattr(target, "buffer", None)
        while True:
            chunk = await stream.read(4096)
            if not chunk:
                break
            if buffer is not None:
                buffer.write(chunk)
            else:
                target.write(chunk.decode("utf-8", errors="replace"))
            target.flush()

    async def dispatch(self, url: Optional[str]) -> Optional[int]:
        """
        启动工作进程处理一个URL并等待其结束

        Args:
            url: 相册页或列表页URL，为空时不做任何事

        Returns:
            子进程退出码；url 为空时返回 None
        """
        if not url:
            return None

        process = await asyncio.create_subprocess_exec(
            *self.build_command(url),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=self.build_env(),
        )
        self.stats["dispatched"] += 1
        self.log.info("create child process {} working for {}", process.pid, url)

        await asyncio.gather(
            self._forward(process.stdout, sys.stdout),
            self._forward(process.stderr, sys.stderr),
        )
        code = await process.wait()

        if code == 0:
            self.stats["succeeded"] += 1
            self.log.info("child process {} exit by {}", process.pid, code)
        else:
            self.stats["failed"] += 1
            self.log.warning("child process {} exit by {} ({})", process.pid, code, url)
        return code

    def get_stats(self):
        return self.stats.copy()
