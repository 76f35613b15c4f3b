import logging
import uuid

from mediastream.application.errors.exceptions import NotFoundError
from mediastream.domain.external.file_storage import FileStorage
from mediastream.domain.repositories.file_record_repository import FileRecordRepository

logger = logging.getLogger(__name__)


class FileDeleteService:
    """文件删除服务"""

    def __init__(
        self,
        file_storage: FileStorage,
        file_record_repository: FileRecordRepository,
    ) -> None:
        self._file_storage = file_storage
        self._file_record_repository = file_record_repository

    def delete(self, file_id: uuid.UUID) -> None:
        """删除文件，存储字节尽力删除，文件记录一定删除"""
        # 1.检查文件是否存在
        record = self._file_record_repository.get_by_id(file_id)
        if record is None:
            raise NotFoundError.for_file(file_id)

        # 2.删除原始文件字节
        self._delete_quietly(record.storage_locator)

        # 3.删除缩略图字节
        if record.has_thumbnail():
            self._delete_quietly(record.thumbnail_locator)

        # 4.删除文件记录，此步骤的异常直接向上抛出
        self._file_record_repository.delete(file_id)
        logger.info(f"文件已删除: id={file_id}, name={record.original_name}")

    def _delete_quietly(self, locator: str) -> None:
        try:
            self._file_storage.delete(locator)
        except Exception as e:
            logger.warning(f"删除存储文件失败: {locator}, {str(e)}", exc_info=True)
