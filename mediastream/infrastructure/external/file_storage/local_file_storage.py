import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from mediastream.application.errors.exceptions import (
    InvalidPathError,
    InvalidRangeError,
    NotFoundError,
    StorageError,
)
from mediastream.domain.external.file_storage import FileStorage

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class RangeReader(io.RawIOBase):
    """只读取[start, end]闭区间的字节流，超出区间的读取一律返回EOF"""

    def __init__(self, raw: BinaryIO, start: int, end: int) -> None:
        super().__init__()
        self._raw = raw
        self._raw.seek(start)
        self._remaining = end - start + 1

    @property
    def remaining(self) -> int:
        return self._remaining

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._remaining <= 0:
            return 0
        view = memoryview(buffer)
        limit = min(len(view), self._remaining)
        data = self._raw.read(limit)
        if not data:
            self._remaining = 0
            return 0
        count = len(data)
        view[:count] = data
        self._remaining -= count
        return count

    def close(self) -> None:
        if not self.closed:
            try:
                self._raw.close()
            finally:
                super().close()


class LocalFileStorage(FileStorage):
    """基于本地文件系统的文件存储扩展，定位符为基础目录下文件的绝对路径"""

    def __init__(self, base_path: Union[str, Path]) -> None:
        """构造函数，完成基础目录的创建"""
        try:
            self._base_path = Path(base_path).expanduser().resolve()
            self._base_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError("init", str(base_path), cause=e) from e
        logger.info(f"本地文件存储初始化完成，基础目录: {self._base_path}")

    @property
    def base_path(self) -> Path:
        return self._base_path

    def save(self, name: str, stream: BinaryIO, size: int) -> str:
        """将字节流按块写入基础目录下的指定文件，已存在的文件会被覆盖"""
        # 1.解析并校验目标路径
        target = self._resolve(name)

        # 2.创建父目录并按块写入
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            written = 0
            with open(target, "wb") as output:
                while True:
                    chunk = stream.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    output.write(chunk)
                    written += len(chunk)
        except OSError as e:
            raise StorageError("save", str(target), cause=e) from e

        if size >= 0 and written != size:
            logger.warning(f"写入字节数与声明大小不一致: {target}, 声明{size}, 实际{written}")
        logger.debug(f"文件已写入本地存储: {target} ({written} bytes)")
        return str(target)

    def load(self, locator: str) -> BinaryIO:
        path = self._existing(locator)
        try:
            return open(path, "rb")
        except FileNotFoundError as e:
            raise NotFoundError.for_locator(locator) from e
        except OSError as e:
            raise StorageError("load", locator, cause=e) from e

    def load_partial(self, locator: str, start: int, end: int) -> BinaryIO:
        """打开[start, end]闭区间的字节流，最多返回end-start+1个字节"""
        if start < 0 or end < start:
            raise InvalidRangeError(f"bytes={start}-{end}")
        path = self._existing(locator)
        raw: Optional[BinaryIO] = None
        try:
            raw = open(path, "rb")
            return RangeReader(raw, start, end)
        except FileNotFoundError as e:
            raise NotFoundError.for_locator(locator) from e
        except OSError as e:
            if raw is not None:
                raw.close()
            raise StorageError("load_partial", locator, cause=e) from e

    def delete(self, locator: str) -> None:
        """删除文件，文件不存在时静默返回"""
        path = self._resolve(locator)
        try:
            path.unlink()
            logger.debug(f"文件已从本地存储删除: {path}")
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError("delete", locator, cause=e) from e

    def exists(self, locator: str) -> bool:
        return self._resolve(locator).is_file()

    def size(self, locator: str) -> int:
        path = self._existing(locator)
        try:
            return path.stat().st_size
        except FileNotFoundError as e:
            raise NotFoundError.for_locator(locator) from e
        except OSError as e:
            raise StorageError("size", locator, cause=e) from e

    def _existing(self, locator: str) -> Path:
        path = self._resolve(locator)
        if not path.is_file():
            raise NotFoundError.for_locator(locator)
        return path

    def _resolve(self, name: str) -> Path:
        """将文件名或定位符规范化为基础目录下的路径，逃逸出基础目录时抛出InvalidPathError"""
        if not name or not name.strip() or "\x00" in name:
            raise InvalidPathError(name or "")
        candidate = Path(name)
        if not candidate.is_absolute():
            candidate = self._base_path / candidate
        resolved = candidate.resolve()
        if resolved == self._base_path or not resolved.is_relative_to(self._base_path):
            logger.warning(f"拒绝访问基础目录之外的路径: {name}")
            raise InvalidPathError(name)
        return resolved
