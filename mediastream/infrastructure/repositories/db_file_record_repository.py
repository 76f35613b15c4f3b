import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, sessionmaker

from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord
from mediastream.domain.repositories.file_record_repository import FileRecordRepository
from mediastream.infrastructure.models import FileRecordModel


class DBFileRecordRepository(FileRecordRepository):
    """基于数据库的文件记录数据仓库，每次调用使用独立的会话与事务"""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """构造函数，完成数据仓库初始化"""
        self._session_factory = session_factory

    def save(self, record: FileRecord) -> FileRecord:
        """根据传递的文件记录存储or更新数据"""
        with self._session_factory() as session, session.begin():
            # 1.根据id查询记录是否存在
            model = session.get(FileRecordModel, str(record.id))

            # 2.不存在则新建，存在则更新
            if model is None:
                session.add(FileRecordModel.from_domain(record))
            else:
                model.update_from_domain(record)
        return record

    def get_by_id(self, file_id: uuid.UUID) -> Optional[FileRecord]:
        with self._session_factory() as session:
            model = session.get(FileRecordModel, str(file_id))
            return model.to_domain() if model is not None else None

    def list(self, page: int, size: int) -> List[FileRecord]:
        """按创建时间倒序分页查询"""
        stmt = (
            select(FileRecordModel)
            .order_by(FileRecordModel.created_at.desc())
            .offset(page * size)
            .limit(size)
        )
        with self._session_factory() as session:
            return [model.to_domain() for model in session.scalars(stmt)]

    def list_by_category(self, category: FileCategory, page: int, size: int) -> List[FileRecord]:
        stmt = (
            select(FileRecordModel)
            .where(FileRecordModel.category == category.value)
            .order_by(FileRecordModel.created_at.desc())
            .offset(page * size)
            .limit(size)
        )
        with self._session_factory() as session:
            return [model.to_domain() for model in session.scalars(stmt)]

    def delete(self, file_id: uuid.UUID) -> None:
        """根据传递的文件id删除文件记录，记录不存在时不报错"""
        with self._session_factory() as session, session.begin():
            model = session.get(FileRecordModel, str(file_id))
            if model is not None:
                session.delete(model)

    def exists(self, file_id: uuid.UUID) -> bool:
        with self._session_factory() as session:
            return session.get(FileRecordModel, str(file_id)) is not None

    def count(self) -> int:
        with self._session_factory() as session:
            return session.scalar(select(func.count()).select_from(FileRecordModel)) or 0

    def count_by_category(self, category: FileCategory) -> int:
        stmt = (
            select(func.count())
            .select_from(FileRecordModel)
            .where(FileRecordModel.category == category.value)
        )
        with self._session_factory() as session:
            return session.scalar(stmt) or 0
