import logging
from functools import lru_cache
from typing import List

from mediastream.application.services.delete_service import FileDeleteService
from mediastream.application.services.file_metadata_service import FileMetadataService
from mediastream.application.services.status_service import StatusService
from mediastream.application.services.stream_service import FileStreamService
from mediastream.application.services.thumbnail_service import ThumbnailService
from mediastream.application.services.upload_service import FileUploadService
from mediastream.core.config import get_settings
from mediastream.domain.external.health_checker import HealthChecker
from mediastream.domain.external.thumbnail_generator import ThumbnailGenerator
from mediastream.domain.repositories.file_record_repository import FileRecordRepository
from mediastream.domain.services.file_type_detector import FileTypeDetector
from mediastream.infrastructure.external.file_storage.local_file_storage import LocalFileStorage
from mediastream.infrastructure.external.health_checker.database_health_checker import (
    DatabaseHealthChecker,
)
from mediastream.infrastructure.external.health_checker.storage_health_checker import (
    StorageHealthChecker,
)
from mediastream.infrastructure.external.thumbnail.ffmpeg_thumbnail_generator import (
    FFmpegThumbnailGenerator,
)
from mediastream.infrastructure.external.thumbnail.pillow_thumbnail_generator import (
    PillowThumbnailGenerator,
)
from mediastream.infrastructure.repositories.db_file_record_repository import (
    DBFileRecordRepository,
)
from mediastream.infrastructure.repositories.in_memory_file_record_repository import (
    InMemoryFileRecordRepository,
)
from mediastream.infrastructure.storage.database import get_database

logger = logging.getLogger(__name__)


def uses_database() -> bool:
    return get_settings().metadata_backend.strip().lower() == "database"


@lru_cache()
def get_file_storage() -> LocalFileStorage:
    """获取本地文件存储"""
    settings = get_settings()
    return LocalFileStorage(settings.storage_base_path)


@lru_cache()
def get_file_type_detector() -> FileTypeDetector:
    return FileTypeDetector()


@lru_cache()
def get_file_record_repository() -> FileRecordRepository:
    """根据配置获取文件记录数据仓库，database需要先在lifespan中完成数据库初始化"""
    if uses_database():
        logger.info("加载获取DBFileRecordRepository")
        return DBFileRecordRepository(session_factory=get_database().session_factory)
    logger.info("加载获取InMemoryFileRecordRepository")
    return InMemoryFileRecordRepository()


def build_thumbnail_generators() -> List[ThumbnailGenerator]:
    """根据配置构建缩略图生成器集合"""
    settings = get_settings()
    generators: List[ThumbnailGenerator] = [PillowThumbnailGenerator()]

    if settings.ffmpeg_enabled:
        ffmpeg = FFmpegThumbnailGenerator(
            ffmpeg_path=settings.ffmpeg_path,
            timeout_seconds=settings.ffmpeg_timeout_seconds,
        )
        if ffmpeg.is_available():
            generators.append(ffmpeg)
        else:
            logger.warning(f"FFmpeg不可用[{settings.ffmpeg_path}]，视频缩略图将被跳过")

    return generators


@lru_cache()
def get_thumbnail_service() -> ThumbnailService:
    return ThumbnailService(build_thumbnail_generators())


@lru_cache()
def get_upload_service() -> FileUploadService:
    """获取文件上传服务"""
    settings = get_settings()
    return FileUploadService(
        file_storage=get_file_storage(),
        file_record_repository=get_file_record_repository(),
        thumbnail_service=get_thumbnail_service(),
        file_type_detector=get_file_type_detector(),
        max_file_size=settings.max_file_size,
        allowed_categories=settings.allowed_category_set(),
        thumbnail_enabled=settings.thumbnail_enabled,
        thumbnail_width=settings.thumbnail_width,
        thumbnail_height=settings.thumbnail_height,
    )


@lru_cache()
def get_stream_service() -> FileStreamService:
    return FileStreamService(
        file_storage=get_file_storage(),
        file_record_repository=get_file_record_repository(),
    )


@lru_cache()
def get_delete_service() -> FileDeleteService:
    return FileDeleteService(
        file_storage=get_file_storage(),
        file_record_repository=get_file_record_repository(),
    )


@lru_cache()
def get_file_metadata_service() -> FileMetadataService:
    return FileMetadataService(file_record_repository=get_file_record_repository())


def get_status_service() -> StatusService:
    """获取状态服务，包含存储与数据库的健康检查"""
    checkers: List[HealthChecker] = [StorageHealthChecker(get_file_storage())]
    if uses_database():
        checkers.append(DatabaseHealthChecker(get_database().session_factory))
    return StatusService(checkers=checkers)
