import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .file_category import FileCategory


def format_size(size: int) -> str:
    """将字节数格式化为便于阅读的字符串，例如 15.5 MB"""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    if size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    return f"{size / (1024 * 1024 * 1024):.2f} GB"


class FileRecord(BaseModel):
    """文件记录Domain模型，记录一次上传产生的全部元数据，不可变，只能通过复制产生新对象"""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)  # 文件id
    original_name: str  # 上传时的原始文件名
    category: FileCategory  # 文件分类
    media_type: str  # mime-type类型
    size: int = Field(default=0, ge=0)  # 文件大小，单位为字节
    storage_locator: str  # 存储端返回的定位符，只能原样交还给存储端
    thumbnail_locator: Optional[str] = None  # 缩略图定位符，为空表示没有缩略图
    created_at: datetime = Field(default_factory=datetime.now)  # 创建时间
    updated_at: datetime = Field(default_factory=datetime.now)  # 更新时间

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("original_name")
    @classmethod
    def _validate_original_name(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("original_name不能为空")
        return value

    @classmethod
    def create(
        cls,
        original_name: str,
        category: FileCategory,
        media_type: str,
        size: int,
        storage_locator: str,
        file_id: Optional[uuid.UUID] = None,
    ) -> "FileRecord":
        """创建一条新的文件记录，没有缩略图，创建与更新时间相同"""
        now = datetime.now()
        return cls(
            id=file_id or uuid.uuid4(),
            original_name=original_name,
            category=category,
            media_type=media_type,
            size=size,
            storage_locator=storage_locator,
            thumbnail_locator=None,
            created_at=now,
            updated_at=now,
        )

    def with_thumbnail_locator(self, thumbnail_locator: Optional[str]) -> "FileRecord":
        """返回设置了缩略图定位符的新记录，原记录保持不变"""
        return self.model_copy(
            update={"thumbnail_locator": thumbnail_locator, "updated_at": datetime.now()}
        )

    def touch(self) -> "FileRecord":
        """返回更新时间刷新后的新记录"""
        return self.model_copy(update={"updated_at": datetime.now()})

    def has_thumbnail(self) -> bool:
        return bool(self.thumbnail_locator and self.thumbnail_locator.strip())

    def can_generate_thumbnail(self) -> bool:
        return self.category.supports_thumbnail

    def is_image(self) -> bool:
        return self.category is FileCategory.IMAGE

    def is_video(self) -> bool:
        return self.category is FileCategory.VIDEO

    def is_audio(self) -> bool:
        return self.category is FileCategory.AUDIO

    def is_document(self) -> bool:
        return self.category is FileCategory.DOCUMENT

    def is_archive(self) -> bool:
        return self.category is FileCategory.ARCHIVE

    def is_other(self) -> bool:
        return self.category is FileCategory.OTHER

    def is_pdf(self) -> bool:
        return self.is_document() and self.media_type.lower() == "application/pdf"

    def is_media(self) -> bool:
        return self.category.is_media

    def is_streamable(self) -> bool:
        return self.category.is_streamable

    def is_previewable(self) -> bool:
        return self.category.is_previewable

    @property
    def extension(self) -> str:
        """小写扩展名，没有扩展名时返回空字符串"""
        name = self.original_name
        index = name.rfind(".")
        if index == -1 or index == len(name) - 1:
            return ""
        return name[index + 1 :].lower()

    @property
    def base_name(self) -> str:
        index = self.original_name.rfind(".")
        return self.original_name if index == -1 else self.original_name[:index]

    @property
    def formatted_size(self) -> str:
        return format_size(self.size)
