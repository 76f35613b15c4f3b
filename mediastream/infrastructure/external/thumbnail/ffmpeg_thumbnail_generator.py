import logging
import os
import shutil
import subprocess
import tempfile
from typing import BinaryIO, List

from mediastream.application.errors.exceptions import ThumbnailError
from mediastream.domain.external.thumbnail_generator import ThumbnailGenerator
from mediastream.domain.models.file_category import FileCategory

logger = logging.getLogger(__name__)

FRAME_TIMESTAMP = "00:00:01"
VERSION_TIMEOUT_SECONDS = 5
STDERR_LIMIT = 500


class FFmpegThumbnailGenerator(ThumbnailGenerator):
    """基于FFmpeg子进程的视频缩略图生成器，抽取第1秒的一帧输出为JPEG"""

    def __init__(self, ffmpeg_path: str = "ffmpeg", timeout_seconds: int = 30) -> None:
        self._ffmpeg_path = ffmpeg_path
        self._timeout_seconds = timeout_seconds

    @property
    def ffmpeg_path(self) -> str:
        return self._ffmpeg_path

    def supports(self, category: FileCategory) -> bool:
        return category is FileCategory.VIDEO

    def priority(self) -> int:
        return 500

    def is_available(self) -> bool:
        """执行ffmpeg -version判断FFmpeg是否可用"""
        try:
            result = subprocess.run(
                [self._ffmpeg_path, "-version"],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=VERSION_TIMEOUT_SECONDS,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"FFmpeg不可用: {str(e)}")
            return False
        return result.returncode == 0

    def generate(self, stream: BinaryIO, width: int, height: int) -> bytes:
        """将字节流落地为临时文件后再抽帧，视频容器需要随机访问"""
        fd, temp_path = tempfile.mkstemp(prefix="mediastream-", suffix=".video")
        try:
            with os.fdopen(fd, "wb") as temp_file:
                shutil.copyfileobj(stream, temp_file)
            return self.generate_from_location(temp_path, width, height)
        except OSError as e:
            raise ThumbnailError(f"视频临时文件写入失败: {str(e)}") from e
        finally:
            try:
                os.remove(temp_path)
            except OSError:
                logger.warning(f"删除视频临时文件失败: {temp_path}", exc_info=True)

    def generate_from_location(self, locator: str, width: int, height: int) -> bytes:
        # 1.构建命令行参数
        command = self._build_command(locator, width, height)
        logger.debug(f"执行FFmpeg命令: {' '.join(command)}")

        # 2.执行子进程，超时后子进程会被杀死
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self._timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ThumbnailError(f"FFmpeg执行超时({self._timeout_seconds}s): {locator}") from e
        except OSError as e:
            raise ThumbnailError(f"FFmpeg无法启动[{self._ffmpeg_path}]: {str(e)}") from e

        # 3.校验退出码与输出
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")[:STDERR_LIMIT]
            raise ThumbnailError(f"FFmpeg退出码{result.returncode}: {stderr}")
        if not result.stdout:
            raise ThumbnailError(f"FFmpeg没有输出任何图片数据: {locator}")

        logger.debug(f"视频缩略图生成完成: {locator}, {len(result.stdout)} bytes")
        return result.stdout

    def _build_command(self, locator: str, width: int, height: int) -> List[str]:
        return [
            self._ffmpeg_path,
            "-i",
            locator,
            "-ss",
            FRAME_TIMESTAMP,
            "-vframes",
            "1",
            "-vf",
            f"scale={width}:{height}:force_original_aspect_ratio=decrease",
            "-q:v",
            "2",
            "-f",
            "image2pipe",
            "-vcodec",
            "mjpeg",
            "-",
        ]
