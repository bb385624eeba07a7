"""
异步下载队列模块

页面只负责提交图片任务，不等待下载完成；
固定数量的消费者并发执行下载，进程退出前通过 join() 等待全部完成。
"""
import asyncio
from typing import List, Dict, Any, Optional, Callable, Awaitable
from collections import deque
from loguru import logger


class DownloadQueue:
    """
    后台下载队列

    使用 asyncio.Queue 实现生产者-消费者模式：
    - submit() 立即返回，不阻塞页面处理
    - max_workers 个消费者并发执行任务
    - join() 为显式的排空点

    Example:
        queue = DownloadQueue(downloader.download, max_workers=8)
        queue.submit(url)
        await queue.join()
    """

    def __init__(
        self,
        worker_func: Callable[[Any], Awaitable[Any]],
        max_workers: int = 8,
        log=None
    ):
        """
        Args:
            worker_func: 工作函数（异步），每个任务调用一次
            max_workers: 消费者数量
            log: 日志上下文
        """
        self.worker_func = worker_func
        self.max_workers = max(1, max_workers)
        self.log = log or logger
        self.queue: Optional[asyncio.Queue] = None
        self._consumers: List[asyncio.Task] = []
        # 正在执行的任务数（同一URL可能被提交多次，不能按URL去重计数）
        self.in_flight = 0

        self.stats = {
            'total_tasks': 0,
            'completed_tasks': 0,
            'failed_tasks': 0,
        }
        # 错误记录
        self.errors = deque(maxlen=100)

    @property
    def started(self) -> bool:
        return bool(self._consumers)

    def start(self):
        """启动消费者（需在事件循环内调用）"""
        if self.started:
            return
        self.queue = asyncio.Queue()
        self._consumers = [
            asyncio.create_task(self._consumer(worker_id=i))
            for i in range(self.max_workers)
        ]
        self.log.debug("download queue started: max_workers={}", self.max_workers)

    def submit(self, item: Any):
        """提交任务（不等待执行）"""
        if not self.started:
            self.start()
        self.stats['total_tasks'] += 1
        self.queue.put_nowait(item)

    async def _consumer(self, worker_id: int):
        """消费者：从队列取任务并执行"""
        while True:
            item = await self.queue.get()
            self.in_flight += 1
            try:
                await self.worker_func(item)
                self.stats['completed_tasks'] += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # 单个任务失败不影响其他任务
                self.stats['failed_tasks'] += 1
                self.errors.append({
                    'item': str(item)[:100],
                    'error': str(e),
                    'worker_id': worker_id
                })
                self.log.error("download worker {} task failed: {}", worker_id, e)
            finally:
                self.in_flight -= 1
                self.queue.task_done()

    async def join(self):
        """等待所有已提交任务完成，然后停止消费者"""
        if not self.started:
            return
        pending = self.queue.qsize() + self.in_flight
        if pending:
            self.log.info("waiting for {} background downloads", pending)
        await self.queue.join()
        await self.close()
        self.log.info(
            "download queue drained: total={}, completed={}, failed={}",
            self.stats['total_tasks'], self.stats['completed_tasks'], self.stats['failed_tasks']
        )

    async def close(self):
        """取消消费者（未完成的任务被丢弃）"""
        for task in self._consumers:
            if not task.done():
                task.cancel()
        await asyncio.gather(*self._consumers, return_exceptions=True)
        self._consumers = []

    def get_stats(self) -> Dict[str, Any]:
        """获取统计信息"""
        return {**self.stats, 'pending': (self.queue.qsize() if self.queue else 0) + self.in_flight}

    def get_errors(self) -> List[Dict[str, Any]]:
        """获取错误列表"""
        return list(self.errors)
