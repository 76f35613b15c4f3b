import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Index, PrimaryKeyConstraint, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ...domain.models.file_record import FileRecord
from .base import Base


class FileRecordModel(Base):
    """文件记录ORM模型"""

    __tablename__ = "file_records"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="pk_file_records_id"),
        Index("ix_file_records_category", "category"),
        Index("ix_file_records_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        nullable=False,
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )  # 文件id
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)  # 原始文件名
    category: Mapped[str] = mapped_column(String(32), nullable=False)  # 文件分类
    media_type: Mapped[str] = mapped_column(String(255), nullable=False)  # mime-type类型
    size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)  # 文件大小
    storage_locator: Mapped[str] = mapped_column(Text, nullable=False)  # 存储定位符
    thumbnail_locator: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # 缩略图定位符
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.now,
    )  # 创建时间
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.now,
        onupdate=datetime.now,
    )  # 更新时间

    @classmethod
    def from_domain(cls, record: FileRecord) -> "FileRecordModel":
        """从领域模型创建ORM模型"""
        return cls(**cls._column_values(record))

    def to_domain(self) -> FileRecord:
        """将ORM模型转换为领域模型"""
        return FileRecord.model_validate(self, from_attributes=True)

    def update_from_domain(self, record: FileRecord) -> None:
        """从领域模型更新数据"""
        for field, value in self._column_values(record).items():
            setattr(self, field, value)

    @staticmethod
    def _column_values(record: FileRecord) -> dict:
        data = record.model_dump()
        data["id"] = str(record.id)
        data["category"] = record.category.value
        return data
