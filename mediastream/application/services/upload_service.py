import io
import logging
import uuid
from typing import FrozenSet, Iterable, Optional

from mediastream.application.errors.exceptions import (
    SizeExceededError,
    UnsupportedTypeError,
)
from mediastream.application.services.thumbnail_service import ThumbnailService
from mediastream.domain.external.file_storage import FileStorage
from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord, format_size
from mediastream.domain.models.upload import UploadOutcome, UploadRequest
from mediastream.domain.repositories.file_record_repository import FileRecordRepository
from mediastream.domain.services.file_type_detector import FileTypeDetector

logger = logging.getLogger(__name__)

THUMBNAIL_SUFFIX = "_thumb.jpg"


class FileUploadService:
    """文件上传服务，负责校验、持久化字节、生成缩略图以及保存文件记录"""

    def __init__(
        self,
        file_storage: FileStorage,
        file_record_repository: FileRecordRepository,
        thumbnail_service: ThumbnailService,
        file_type_detector: Optional[FileTypeDetector] = None,
        max_file_size: int = 0,
        allowed_categories: Optional[Iterable[FileCategory]] = None,
        thumbnail_enabled: bool = True,
        thumbnail_width: int = 320,
        thumbnail_height: int = 180,
    ) -> None:
        """构造函数，max_file_size<=0表示不限制大小，allowed_categories为空表示不限制分类"""
        self._file_storage = file_storage
        self._file_record_repository = file_record_repository
        self._thumbnail_service = thumbnail_service
        self._file_type_detector = file_type_detector or FileTypeDetector()
        self._max_file_size = max_file_size
        self._allowed_categories: FrozenSet[FileCategory] = frozenset(allowed_categories or ())
        self._thumbnail_enabled = thumbnail_enabled
        self._thumbnail_width = thumbnail_width
        self._thumbnail_height = thumbnail_height
        thumbnail = f"{thumbnail_width}x{thumbnail_height}" if thumbnail_enabled else "disabled"
        logger.info(
            f"文件上传服务初始化完成: max_file_size={self._describe_max_size()}, "
            f"allowed_types={self._describe_allowed()}, thumbnail={thumbnail}"
        )

    @classmethod
    def without_limits(
        cls,
        file_storage: FileStorage,
        file_record_repository: FileRecordRepository,
        thumbnail_service: ThumbnailService,
        file_type_detector: Optional[FileTypeDetector] = None,
    ) -> "FileUploadService":
        """不限制大小和分类、使用默认缩略图尺寸的上传服务"""
        return cls(
            file_storage=file_storage,
            file_record_repository=file_record_repository,
            thumbnail_service=thumbnail_service,
            file_type_detector=file_type_detector,
        )

    @property
    def max_file_size(self) -> int:
        return self._max_file_size

    @property
    def allowed_categories(self) -> FrozenSet[FileCategory]:
        return self._allowed_categories

    def upload(self, request: UploadRequest) -> UploadOutcome:
        """执行一次上传，校验全部通过之后才会写入字节"""
        logger.info(
            f"开始上传文件: {request.original_name} ({request.media_type}, {format_size(request.size)})"
        )

        # 1.根据文件名与media-type识别分类
        category = self._file_type_detector.detect(request.original_name, request.media_type)

        # 2.校验文件大小
        self._validate_size(request)

        # 3.校验文件分类
        self._validate_category(request, category)

        # 4.生成文件id与存储名
        file_id = uuid.uuid4()
        storage_name = self._storage_name(file_id, request.original_name)

        # 5.将字节写入存储
        storage_locator = self._file_storage.save(storage_name, request.stream, request.size)
        logger.debug(f"文件字节已保存: {storage_locator}")

        # 6.构建文件记录
        record = FileRecord.create(
            original_name=request.original_name,
            category=category,
            media_type=request.media_type,
            size=request.size,
            storage_locator=storage_locator,
            file_id=file_id,
        )

        # 7.尝试生成缩略图，失败不影响上传
        if self._thumbnail_enabled and self._thumbnail_service.supports(category):
            thumbnail_locator = self._try_generate_thumbnail(record)
            if thumbnail_locator:
                record = record.with_thumbnail_locator(thumbnail_locator)

        # 8.保存文件记录
        saved = self._file_record_repository.save(record)
        logger.info(
            f"文件上传完成: id={saved.id}, name={saved.original_name}, "
            f"category={saved.category.value}, thumbnail={saved.has_thumbnail()}"
        )
        return UploadOutcome.from_record(saved)

    def _storage_name(self, file_id: uuid.UUID, original_name: str) -> str:
        """存储名为文件id加扩展名，扩展名只保留ASCII字母数字，否则退回纯id"""
        extension = self._file_type_detector.extract_extension(original_name)
        if extension and extension.isascii() and extension.isalnum():
            return f"{file_id}.{extension}"
        return str(file_id)

    def _validate_size(self, request: UploadRequest) -> None:
        if self._max_file_size > 0 and request.size > self._max_file_size:
            raise SizeExceededError(request.size, self._max_file_size, request.original_name)

    def _validate_category(self, request: UploadRequest, category: FileCategory) -> None:
        if self._allowed_categories and category not in self._allowed_categories:
            raise UnsupportedTypeError(
                f"不允许上传的文件类型: {category.value}，允许的类型: {self._describe_allowed()}",
                extension=self._file_type_detector.extract_extension(request.original_name),
                media_type=request.media_type,
                category=category.value,
            )

    def _try_generate_thumbnail(self, record: FileRecord) -> Optional[str]:
        """生成并保存缩略图，返回缩略图定位符，任何失败都只记录警告"""
        try:
            thumbnail = self._thumbnail_service.generate(
                record.category,
                record.storage_locator,
                self._thumbnail_width,
                self._thumbnail_height,
            )
            thumbnail_name = f"{record.id}{THUMBNAIL_SUFFIX}"
            thumbnail_locator = self._file_storage.save(
                thumbnail_name, io.BytesIO(thumbnail), len(thumbnail)
            )
            logger.debug(f"缩略图已保存: {thumbnail_locator}")
            return thumbnail_locator
        except Exception as e:
            logger.warning(f"文件[{record.id}]缩略图生成失败: {str(e)}", exc_info=True)
            return None

    def _describe_max_size(self) -> str:
        return format_size(self._max_file_size) if self._max_file_size > 0 else "unlimited"

    def _describe_allowed(self) -> str:
        if not self._allowed_categories:
            return "all"
        return ",".join(sorted(category.value for category in self._allowed_categories))
