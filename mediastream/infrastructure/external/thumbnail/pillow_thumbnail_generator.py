import io
import logging
from typing import BinaryIO, Union

from PIL import Image, UnidentifiedImageError

from mediastream.application.errors.exceptions import ThumbnailError
from mediastream.domain.external.thumbnail_generator import ThumbnailGenerator
from mediastream.domain.models.file_category import FileCategory

logger = logging.getLogger(__name__)

JPEG_QUALITY = 80


class PillowThumbnailGenerator(ThumbnailGenerator):
    """基于Pillow的图片缩略图生成器，保持宽高比缩放并输出JPEG"""

    def __init__(self, quality: int = JPEG_QUALITY) -> None:
        self._quality = quality

    def supports(self, category: FileCategory) -> bool:
        return category is FileCategory.IMAGE

    def priority(self) -> int:
        return 100

    def generate(self, stream: BinaryIO, width: int, height: int) -> bytes:
        return self._render(stream, width, height, "stream")

    def generate_from_location(self, locator: str, width: int, height: int) -> bytes:
        return self._render(locator, width, height, locator)

    def _render(self, source: Union[str, BinaryIO], width: int, height: int, label: str) -> bytes:
        """读取图片、等比缩放到width x height以内并编码为JPEG"""
        if width <= 0 or height <= 0:
            raise ThumbnailError(f"非法的缩略图尺寸: {width}x{height}")
        try:
            with Image.open(source) as image:
                # 1.等比缩放，不会放大原图
                image.thumbnail((width, height))

                # 2.JPEG不支持透明通道与调色板，统一转换为RGB
                if image.mode != "RGB":
                    image = image.convert("RGB")

                # 3.编码为JPEG
                output = io.BytesIO()
                image.save(output, format="JPEG", quality=self._quality)
        except UnidentifiedImageError as e:
            raise ThumbnailError(f"无法识别的图片格式: {label}") from e
        except (OSError, ValueError) as e:
            raise ThumbnailError(f"图片缩略图生成失败: {label}, {str(e)}") from e

        data = output.getvalue()
        logger.debug(f"图片缩略图生成完成: {label}, {len(data)} bytes")
        return data
