"""
内容寻址存储模块

图片以 "<sha256><扩展名>" 命名保存在下载目录中：
- 相同内容只保存一份
- 已存在的文件不会被覆盖
- 下载目录被多个工作进程共享，写入前仅做存在性检查（非事务）
"""
import hashlib
import os
import tempfile
from pathlib import Path
from typing import Optional, Tuple
from loguru import logger


class ContentStore:
    """按内容哈希保存图片"""

    def __init__(self, root: Path, log=None):
        """
        Args:
            root: 存储目录
            log: 日志上下文（默认使用全局 logger）
        """
        self.root = Path(root)
        self.log = log or logger

    @staticmethod
    def content_hash(data: bytes) -> str:
        """计算原始字节的 SHA-256"""
        return hashlib.sha256(data).hexdigest()

    def path_for(self, digest: str, ext: str = "") -> Path:
        """由哈希和扩展名得到存储路径"""
        if ext and not ext.startswith("."):
            ext = "." + ext
        return self.root / f"{digest}{ext}"

    def exists(self, digest: str, ext: str = "") -> bool:
        return self.path_for(digest, ext).exists()

    def save(self, data: bytes, ext: str = "") -> Tuple[Path, bool]:
        """
        保存图片

        Args:
            data: 图片原始字节
            ext: 原始扩展名（如 ".jpg"）

        Returns:
            (存储路径, 是否新写入)；文件已存在时返回 False 且不覆盖
        """
        path = self.path_for(self.content_hash(data), ext)
        if path.exists():
            self.log.debug("File exists, skip: {}", path.name)
            return path, False

        self.root.mkdir(parents=True, exist_ok=True)
        self._write_atomic(path, data)
        self.log.debug("Saved {} ({} bytes)", path.name, len(data))
        return path, True

    def _write_atomic(self, path: Path, data: bytes):
        """先写临时文件再替换，其他进程只会看到完整文件"""
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".tmp-", suffix=path.suffix)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def count(self, pattern: Optional[str] = None) -> int:
        """统计已保存的图片数量（不含临时文件）"""
        return sum(
            1 for p in self.root.glob(pattern or "*")
            if p.is_file() and not p.name.startswith(".tmp-")
        )
