import threading
import uuid
from typing import Dict, List, Optional

from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord
from mediastream.domain.repositories.file_record_repository import FileRecordRepository


class InMemoryFileRecordRepository(FileRecordRepository):
    """基于内存字典的文件记录数据仓库，进程重启后数据丢失，适合开发与测试"""

    def __init__(self) -> None:
        self._records: Dict[uuid.UUID, FileRecord] = {}
        self._lock = threading.Lock()

    def save(self, record: FileRecord) -> FileRecord:
        with self._lock:
            self._records[record.id] = record
        return record

    def get_by_id(self, file_id: uuid.UUID) -> Optional[FileRecord]:
        with self._lock:
            return self._records.get(file_id)

    def list(self, page: int, size: int) -> List[FileRecord]:
        with self._lock:
            records = list(self._records.values())
        return self._paginate(records, page, size)

    def list_by_category(self, category: FileCategory, page: int, size: int) -> List[FileRecord]:
        with self._lock:
            records = [record for record in self._records.values() if record.category is category]
        return self._paginate(records, page, size)

    def delete(self, file_id: uuid.UUID) -> None:
        with self._lock:
            self._records.pop(file_id, None)

    def exists(self, file_id: uuid.UUID) -> bool:
        with self._lock:
            return file_id in self._records

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def count_by_category(self, category: FileCategory) -> int:
        with self._lock:
            return sum(1 for record in self._records.values() if record.category is category)

    def clear(self) -> None:
        """清空全部记录"""
        with self._lock:
            self._records.clear()

    @staticmethod
    def _paginate(records: List[FileRecord], page: int, size: int) -> List[FileRecord]:
        records.sort(key=lambda record: record.created_at, reverse=True)
        start = page * size
        return records[start : start + size]
