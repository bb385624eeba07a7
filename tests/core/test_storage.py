"""
ContentStore 单元测试
"""
import hashlib
import shutil
import tempfile
import threading
import unittest
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from core.storage import ContentStore


class TestContentStoreHash(unittest.TestCase):
    def test_hash_is_sha256_of_raw_bytes(self):
        data = b"\x89PNG\r\n\x1a\n\xff\xfe\x00binary"
        self.assertEqual(ContentStore.content_hash(data), hashlib.sha256(data).hexdigest())

    def test_identical_bytes_same_hash(self):
        self.assertEqual(ContentStore.content_hash(b"abc"), ContentStore.content_hash(bytes(b"abc")))

    def test_different_bytes_different_hash(self):
        self.assertNotEqual(ContentStore.content_hash(b"\x80"), ContentStore.content_hash(b"\x81"))


class TestContentStoreSave(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.store = ContentStore(Path(self.tmp))

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_save_writes_hash_named_file(self):
        data = b"\xff\xd8\xff\xe0 jpeg bytes"
        path, created = self.store.save(data, ".jpg")
        self.assertTrue(created)
        self.assertEqual(path.name, hashlib.sha256(data).hexdigest() + ".jpg")
        self.assertEqual(path.read_bytes(), data)

    def test_extension_without_dot(self):
        path, _ = self.store.save(b"x", "png")
        self.assertTrue(path.name.endswith(".png"))

    def test_identical_content_stored_once(self):
        p1, c1 = self.store.save(b"same", ".jpg")
        p2, c2 = self.store.save(b"same", ".jpg")
        self.assertTrue(c1)
        self.assertFalse(c2)
        self.assertEqual(p1, p2)
        self.assertEqual(self.store.count(), 1)

    def test_existing_file_never_overwritten(self):
        data = b"original"
        path = self.store.path_for(ContentStore.content_hash(data), ".jpg")
        path.write_bytes(b"already here")
        returned, created = self.store.save(data, ".jpg")
        self.assertFalse(created)
        self.assertEqual(returned, path)
        self.assertEqual(path.read_bytes(), b"already here")

    def test_no_temp_files_left(self):
        self.store.save(b"one", ".jpg")
        self.store.save(b"two", ".gif")
        leftovers = [p for p in Path(self.tmp).iterdir() if p.name.startswith(".tmp-")]
        self.assertEqual(leftovers, [])
        self.assertEqual(self.store.count(), 2)

    def test_exists(self):
        digest = ContentStore.content_hash(b"q")
        self.assertFalse(self.store.exists(digest, ".jpg"))
        self.store.save(b"q", ".jpg")
        self.assertTrue(self.store.exists(digest, ".jpg"))

    def test_creates_missing_root(self):
        store = ContentStore(Path(self.tmp) / "nested" / "dir")
        path, created = store.save(b"z", ".jpg")
        self.assertTrue(created)
        self.assertTrue(path.exists())


class TestContentStoreConcurrentWriters(unittest.TestCase):
    """多个工作进程共享下载目录时同时保存相同内容"""

    def setUp(self):
        self.tmp = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp, ignore_errors=True)

    def test_same_bytes_saved_concurrently_once(self):
        data = b"\xff\xd8\xff\xe0" + b"shared image" * 4096
        writers = 8
        barrier = threading.Barrier(writers)

        def save():
            # 每个写入者使用独立的 store，模拟不同工作进程
            store = ContentStore(Path(self.tmp))
            barrier.wait()
            return store.save(data, ".jpg")

        with ThreadPoolExecutor(max_workers=writers) as pool:
            results = list(pool.map(lambda _: save(), range(writers)))

        expected = Path(self.tmp) / (hashlib.sha256(data).hexdigest() + ".jpg")
        self.assertTrue(all(path == expected for path, _ in results))
        self.assertTrue(any(created for _, created in results))
        files = list(Path(self.tmp).iterdir())
        self.assertEqual(files, [expected])
        self.assertEqual(expected.read_bytes(), data)
