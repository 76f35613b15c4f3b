from abc import ABC, abstractmethod
from typing import BinaryIO

from mediastream.domain.models.file_category import FileCategory

DEFAULT_PRIORITY = 500


class ThumbnailGenerator(ABC):
    """缩略图生成器接口，优先级数值越小越优先"""

    @abstractmethod
    def supports(self, category: FileCategory) -> bool:
        """是否支持该文件分类"""
        ...

    @abstractmethod
    def generate(self, stream: BinaryIO, width: int, height: int) -> bytes:
        """根据字节流生成缩略图"""
        ...

    @abstractmethod
    def generate_from_location(self, locator: str, width: int, height: int) -> bytes:
        """根据存储定位符生成缩略图"""
        ...

    def priority(self) -> int:
        return DEFAULT_PRIORITY

    def name(self) -> str:
        return self.__class__.__name__

    def requires_random_access(self, category: FileCategory) -> bool:
        """该分类的缩略图是否需要随机访问容器（例如视频抽帧），此时只能使用定位符入口"""
        return category is FileCategory.VIDEO
