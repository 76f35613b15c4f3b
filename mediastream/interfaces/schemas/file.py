import uuid
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from mediastream.domain.models.file_category import FileCategory
from mediastream.domain.models.file_record import FileRecord
from mediastream.domain.models.upload import UploadOutcome

T = TypeVar("T")


def stream_url(base_url: str, file_id: uuid.UUID) -> str:
    return f"{base_url}/files/{file_id}/stream"


def thumbnail_url(base_url: str, file_id: uuid.UUID) -> str:
    return f"{base_url}/files/{file_id}/thumbnail"


class UploadResponse(BaseModel):
    """文件上传响应结构"""

    id: uuid.UUID
    original_name: str
    category: FileCategory
    media_type: str
    size: int
    thumbnail_generated: bool
    stream_url: str
    thumbnail_url: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: UploadOutcome, base_url: str) -> "UploadResponse":
        return cls(
            id=outcome.id,
            original_name=outcome.original_name,
            category=outcome.category,
            media_type=outcome.media_type,
            size=outcome.size,
            thumbnail_generated=outcome.thumbnail_generated,
            stream_url=stream_url(base_url, outcome.id),
            thumbnail_url=thumbnail_url(base_url, outcome.id) if outcome.thumbnail_generated else None,
        )


class FileInfoResponse(BaseModel):
    """文件信息响应结构，不对外暴露存储定位符"""

    id: uuid.UUID
    original_name: str
    category: FileCategory
    media_type: str
    size: int
    formatted_size: str
    has_thumbnail: bool
    stream_url: str
    thumbnail_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: FileRecord, base_url: str) -> "FileInfoResponse":
        return cls(
            id=record.id,
            original_name=record.original_name,
            category=record.category,
            media_type=record.media_type,
            size=record.size,
            formatted_size=record.formatted_size,
            has_thumbnail=record.has_thumbnail(),
            stream_url=stream_url(base_url, record.id),
            thumbnail_url=thumbnail_url(base_url, record.id) if record.has_thumbnail() else None,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class PagedResponse(BaseModel, Generic[T]):
    """分页数据结构"""

    items: List[T]
    page: int
    size: int
    total: int
