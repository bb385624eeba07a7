"""
DownloadQueue 单元测试
"""
import asyncio
import unittest

from core.crawl_queue import DownloadQueue


class TestDownloadQueue(unittest.TestCase):
    """DownloadQueue 测试类"""

    def test_init(self):
        queue = DownloadQueue(lambda item: None, max_workers=3)
        self.assertEqual(queue.max_workers, 3)
        self.assertFalse(queue.started)
        self.assertEqual(queue.stats['total_tasks'], 0)

    def test_max_workers_at_least_one(self):
        queue = DownloadQueue(lambda item: None, max_workers=0)
        self.assertEqual(queue.max_workers, 1)

    def test_submit_does_not_wait(self):
        """submit 立即返回，任务在 join 时完成"""
        done = []

        async def work(item):
            await asyncio.sleep(0.01)
            done.append(item)

        async def run():
            queue = DownloadQueue(work, max_workers=2)
            for i in range(5):
                queue.submit(i)
            self.assertEqual(done, [])
            await queue.join()
            return queue

        queue = asyncio.run(run())
        self.assertEqual(sorted(done), [0, 1, 2, 3, 4])
        self.assertEqual(queue.stats['completed_tasks'], 5)
        self.assertFalse(queue.started)

    def test_concurrency_bounded(self):
        active = 0
        peak = 0

        async def work(item):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

        async def run():
            queue = DownloadQueue(work, max_workers=3)
            for i in range(10):
                queue.submit(i)
            await queue.join()

        asyncio.run(run())
        self.assertLessEqual(peak, 3)
        self.assertGreater(peak, 1)

    def test_failed_task_recorded(self):
        async def work(item):
            if item == "bad":
                raise ValueError("boom")

        async def run():
            queue = DownloadQueue(work, max_workers=2)
            queue.submit("good")
            queue.submit("bad")
            await queue.join()
            return queue

        queue = asyncio.run(run())
        self.assertEqual(queue.stats['completed_tasks'], 1)
        self.assertEqual(queue.stats['failed_tasks'], 1)
        errors = queue.get_errors()
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0]['item'], "bad")
        self.assertIn("boom", errors[0]['error'])

    def test_join_without_tasks(self):
        async def run():
            queue = DownloadQueue(lambda item: None)
            await queue.join()
            return queue

        queue = asyncio.run(run())
        self.assertEqual(queue.get_stats()['pending'], 0)

    def test_pending_counts_duplicate_items(self):
        """同一URL被提交两次时，两次执行都计入 pending"""
        release = None
        started = []

        async def work(item):
            started.append(item)
            await release.wait()

        async def run():
            nonlocal release
            release = asyncio.Event()
            queue = DownloadQueue(work, max_workers=2)
            queue.submit("http://site/a.jpg")
            queue.submit("http://site/a.jpg")
            while len(started) < 2:
                await asyncio.sleep(0)
            running = queue.get_stats()['pending']
            release.set()
            await queue.join()
            return running, queue.get_stats()['pending']

        running, after = asyncio.run(run())
        self.assertEqual(running, 2)
        self.assertEqual(after, 0)
