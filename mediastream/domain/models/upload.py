import uuid
from typing import Any, BinaryIO

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .file_category import FileCategory
from .file_record import FileRecord


class UploadRequest(BaseModel):
    """上传命令，构造时完成校验：文件名与media-type非空、大小非负、字节流存在"""

    original_name: str
    media_type: str
    size: int = Field(ge=0)
    stream: Any

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("original_name", "media_type")
    @classmethod
    def _validate_not_blank(cls, value: str, info) -> str:
        if not value or not value.strip():
            raise ValueError(f"{info.field_name}不能为空")
        return value

    @field_validator("stream")
    @classmethod
    def _validate_stream(cls, value: Any) -> BinaryIO:
        if value is None:
            raise ValueError("stream不能为空")
        if not hasattr(value, "read"):
            raise ValueError("stream必须是可读取的字节流")
        return value


class UploadOutcome(BaseModel):
    """上传结果，FileRecord的只读投影"""

    id: uuid.UUID
    original_name: str
    category: FileCategory
    media_type: str
    size: int
    thumbnail_generated: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_record(cls, record: FileRecord) -> "UploadOutcome":
        return cls(
            id=record.id,
            original_name=record.original_name,
            category=record.category,
            media_type=record.media_type,
            size=record.size,
            thumbnail_generated=record.has_thumbnail(),
        )
