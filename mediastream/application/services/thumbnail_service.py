import logging
from typing import BinaryIO, Iterable, List

from mediastream.application.errors.exceptions import AppException, ThumbnailError
from mediastream.domain.external.thumbnail_generator import ThumbnailGenerator
from mediastream.domain.models.file_category import FileCategory

logger = logging.getLogger(__name__)


class ThumbnailService:
    """缩略图服务，从按优先级排序的生成器集合中为文件分类挑选生成器"""

    def __init__(self, generators: Iterable[ThumbnailGenerator]) -> None:
        """构造函数，生成器只在构造时排序一次，优先级相同时保持注册顺序"""
        self._generators: List[ThumbnailGenerator] = sorted(
            generators, key=lambda generator: generator.priority()
        )
        logger.info(f"缩略图服务初始化完成，可用生成器: {self.generator_names()}")

    @property
    def generators(self) -> List[ThumbnailGenerator]:
        return list(self._generators)

    def generator_names(self) -> List[str]:
        return [generator.name() for generator in self._generators]

    def supports(self, category: FileCategory) -> bool:
        """是否存在支持该分类的生成器"""
        return any(generator.supports(category) for generator in self._generators)

    def get_generator(self, category: FileCategory) -> ThumbnailGenerator:
        """返回支持该分类且优先级最高的生成器"""
        for generator in self._generators:
            if generator.supports(category):
                return generator
        raise ThumbnailError(f"没有可用于[{category.value}]分类的缩略图生成器")

    def generate(self, category: FileCategory, locator: str, width: int, height: int) -> bytes:
        """根据存储定位符生成缩略图"""
        generator = self.get_generator(category)
        logger.debug(f"使用[{generator.name()}]生成缩略图: {locator}")
        try:
            return generator.generate_from_location(locator, width, height)
        except AppException:
            raise
        except Exception as e:
            raise ThumbnailError(f"缩略图生成器[{generator.name()}]执行失败: {str(e)}") from e

    def generate_from_stream(
        self, category: FileCategory, stream: BinaryIO, width: int, height: int
    ) -> bytes:
        """根据字节流生成缩略图，需要随机访问的分类（视频）直接失败"""
        # 1.需要随机访问的分类不能使用字节流入口
        if category is FileCategory.VIDEO:
            raise ThumbnailError("视频缩略图需要随机访问文件，请使用存储定位符生成")

        # 2.挑选生成器并执行
        generator = self.get_generator(category)
        if generator.requires_random_access(category):
            raise ThumbnailError(f"缩略图生成器[{generator.name()}]需要随机访问文件")
        try:
            return generator.generate(stream, width, height)
        except AppException:
            raise
        except Exception as e:
            raise ThumbnailError(f"缩略图生成器[{generator.name()}]执行失败: {str(e)}") from e
