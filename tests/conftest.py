import io
import os
import tempfile
import uuid
from typing import BinaryIO, Dict, Generator, List

import pytest

# 测试环境使用内存元数据与临时存储目录，必须在导入应用之前设置
os.environ.setdefault("MEDIASTREAM_METADATA_BACKEND", "memory")
os.environ.setdefault("MEDIASTREAM_FFMPEG_ENABLED", "false")
os.environ.setdefault("MEDIASTREAM_STORAGE_BASE_PATH", tempfile.mkdtemp(prefix="mediastream-test-"))

from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402

from mediastream.application.errors.exceptions import NotFoundError  # noqa: E402
from mediastream.main import app  # noqa: E402


class FakeFileStorage:
    """基于内存字典的文件存储，定位符即存储名"""

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}
        self.deleted: List[str] = []

    def save(self, name: str, stream: BinaryIO, size: int) -> str:
        self.files[name] = stream.read()
        return name

    def load(self, locator: str) -> BinaryIO:
        if locator not in self.files:
            raise NotFoundError.for_locator(locator)
        return io.BytesIO(self.files[locator])

    def load_partial(self, locator: str, start: int, end: int) -> BinaryIO:
        if locator not in self.files:
            raise NotFoundError.for_locator(locator)
        return io.BytesIO(self.files[locator][start : end + 1])

    def delete(self, locator: str) -> None:
        self.deleted.append(locator)
        self.files.pop(locator, None)

    def exists(self, locator: str) -> bool:
        return locator in self.files

    def size(self, locator: str) -> int:
        if locator not in self.files:
            raise NotFoundError.for_locator(locator)
        return len(self.files[locator])


def make_jpeg(width: int = 640, height: int = 360, color: str = "red") -> bytes:
    """生成一张真实的JPEG图片"""
    output = io.BytesIO()
    Image.new("RGB", (width, height), color).save(output, format="JPEG")
    return output.getvalue()


def make_png(width: int = 64, height: int = 64) -> bytes:
    """生成一张带透明通道的PNG图片"""
    output = io.BytesIO()
    Image.new("RGBA", (width, height), (0, 128, 255, 100)).save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def fake_storage() -> FakeFileStorage:
    return FakeFileStorage()


@pytest.fixture
def random_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture(scope="session")
def client() -> Generator[TestClient, None, None]:
    """
    创建一个可供所有测试用例使用的 TestClient 客户端。
    scope="session" 表示这个fixture 在整个测试用例只会实例一次，这样可以提高效率
    :return: TestClient
    """
    with TestClient(app) as c:
        yield c


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()
