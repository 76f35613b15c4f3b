import uuid
from typing import List, Optional, Protocol

from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord


class FileRecordRepository(Protocol):
    """文件记录数据仓库"""

    def save(self, record: FileRecord) -> FileRecord:
        """新增或更新文件记录"""
        ...

    def get_by_id(self, file_id: uuid.UUID) -> Optional[FileRecord]:
        """根据传递的文件id获取文件记录"""
        ...

    def list(self, page: int, size: int) -> List[FileRecord]:
        """按创建时间倒序分页查询"""
        ...

    def list_by_category(self, category: FileCategory, page: int, size: int) -> List[FileRecord]:
        """按分类过滤后按创建时间倒序分页查询"""
        ...

    def delete(self, file_id: uuid.UUID) -> None:
        """根据传递的文件id删除文件记录"""
        ...

    def exists(self, file_id: uuid.UUID) -> bool:
        ...

    def count(self) -> int:
        ...

    def count_by_category(self, category: FileCategory) -> int:
        """统计指定分类的文件记录数量"""
        ...
