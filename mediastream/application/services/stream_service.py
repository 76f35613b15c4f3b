import logging
import uuid
from typing import Optional

from mediastream.application.errors.exceptions import NotFoundError
from mediastream.domain.external.file_storage import FileStorage
from mediastream.domain.models.byte_range import ByteRange
from mediastream.domain.models.file_record import FileRecord
from mediastream.domain.models.streamable_content import StreamableContent
from mediastream.domain.repositories.file_record_repository import FileRecordRepository

logger = logging.getLogger(__name__)

THUMBNAIL_MEDIA_TYPE = "image/jpeg"


class FileStreamService:
    """文件流服务，处理完整读取与Range部分读取，每次调用都是无状态的"""

    def __init__(
        self,
        file_storage: FileStorage,
        file_record_repository: FileRecordRepository,
    ) -> None:
        self._file_storage = file_storage
        self._file_record_repository = file_record_repository

    def stream(self, file_id: uuid.UUID, range_header: Optional[str] = None) -> StreamableContent:
        """打开文件内容，返回的字节流由调用方负责关闭"""
        # 1.查询文件记录
        record = self._get_record(file_id)

        # 2.没有Range头或者不是bytes单位则返回完整内容
        if not ByteRange.is_byte_range(range_header):
            logger.debug(f"完整读取文件: {file_id}")
            stream = self._file_storage.load(record.storage_locator)
            return StreamableContent.full(record, stream)

        # 3.解析Range头并读取部分内容
        byte_range = ByteRange.parse(range_header, record.size)
        logger.debug(f"部分读取文件: {file_id}, {byte_range.content_range(record.size)}")
        stream = self._file_storage.load_partial(
            record.storage_locator, byte_range.start, byte_range.end
        )
        return StreamableContent.partial(record, stream, byte_range.start, byte_range.end)

    def get_thumbnail(self, file_id: uuid.UUID) -> StreamableContent:
        """打开文件的缩略图，没有缩略图时抛出NotFoundError"""
        record = self._get_record(file_id)
        if not record.has_thumbnail():
            raise NotFoundError(f"该文件[{file_id}]没有缩略图", file_id=file_id)

        thumbnail_locator = record.thumbnail_locator
        content_length = self._file_storage.size(thumbnail_locator)
        stream = self._file_storage.load(thumbnail_locator)
        return StreamableContent(
            stream=stream,
            record=record,
            content_length=content_length,
            media_type_override=THUMBNAIL_MEDIA_TYPE,
        )

    def _get_record(self, file_id: uuid.UUID) -> FileRecord:
        record = self._file_record_repository.get_by_id(file_id)
        if record is None:
            raise NotFoundError.for_file(file_id)
        return record
