import uuid
from typing import List

from mediastream.application.errors.exceptions import BadRequestError, NotFoundError
from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord
from mediastream.domain.repositories.file_record_repository import FileRecordRepository

MAX_PAGE_SIZE = 100


class FileMetadataService:
    """文件元数据查询服务"""

    def __init__(self, file_record_repository: FileRecordRepository) -> None:
        self._file_record_repository = file_record_repository

    def get_by_id(self, file_id: uuid.UUID) -> FileRecord:
        record = self._file_record_repository.get_by_id(file_id)
        if record is None:
            raise NotFoundError.for_file(file_id)
        return record

    def list_files(self, page: int = 0, size: int = 20) -> List[FileRecord]:
        """分页查询文件记录，page从0开始，size取值范围为1~100"""
        self._validate_page(page, size)
        return self._file_record_repository.list(page, size)

    def list_by_category(self, category: FileCategory, page: int = 0, size: int = 20) -> List[FileRecord]:
        self._validate_page(page, size)
        return self._file_record_repository.list_by_category(category, page, size)

    def count(self) -> int:
        return self._file_record_repository.count()

    def count_by_category(self, category: FileCategory) -> int:
        return self._file_record_repository.count_by_category(category)

    @staticmethod
    def _validate_page(page: int, size: int) -> None:
        if page < 0:
            raise BadRequestError("page不能小于0")
        if size < 1 or size > MAX_PAGE_SIZE:
            raise BadRequestError(f"size取值范围为1~{MAX_PAGE_SIZE}")
