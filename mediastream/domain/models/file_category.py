"""文件分类领域模型"""

from enum import Enum
from typing import FrozenSet, Optional


class FileCategory(str, Enum):
    """文件内容分类，封闭集合，每个分类携带可识别的扩展名集合与缩略图能力标识"""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    ARCHIVE = "archive"
    OTHER = "other"

    @property
    def extensions(self) -> FrozenSet[str]:
        """该分类可识别的扩展名（小写，无点号）"""
        return _EXTENSIONS[self]

    @property
    def media_type_prefixes(self) -> FrozenSet[str]:
        return _MEDIA_TYPE_PREFIXES[self]

    @property
    def supports_thumbnail(self) -> bool:
        """是否可以生成缩略图（图片、视频、文档）"""
        return self in (FileCategory.IMAGE, FileCategory.VIDEO, FileCategory.DOCUMENT)

    @property
    def is_media(self) -> bool:
        return self in (FileCategory.IMAGE, FileCategory.VIDEO, FileCategory.AUDIO)

    @property
    def is_streamable(self) -> bool:
        """视频与音频适合做Range流式播放"""
        return self in (FileCategory.VIDEO, FileCategory.AUDIO)

    @property
    def is_previewable(self) -> bool:
        return self in (
            FileCategory.IMAGE,
            FileCategory.VIDEO,
            FileCategory.AUDIO,
            FileCategory.DOCUMENT,
        )

    def supports(self, extension: str) -> bool:
        """判断扩展名是否属于该分类，不区分大小写"""
        return extension.strip().lower().lstrip(".") in self.extensions

    @classmethod
    def from_extension(cls, extension: Optional[str]) -> "FileCategory":
        """根据扩展名查找分类，未识别时返回OTHER"""
        if not extension:
            return cls.OTHER
        normalized = extension.strip().lower().lstrip(".")
        for category in cls:
            if normalized in category.extensions:
                return category
        return cls.OTHER

    @classmethod
    def from_media_type(cls, media_type: Optional[str]) -> "FileCategory":
        """根据Content-Type前缀查找分类，未识别时返回OTHER"""
        if not media_type:
            return cls.OTHER
        normalized = media_type.strip().lower()
        for category in cls:
            if any(normalized.startswith(prefix) for prefix in category.media_type_prefixes):
                return category
        return cls.OTHER

    @classmethod
    def from_file_name(cls, file_name: Optional[str]) -> "FileCategory":
        if not file_name or "." not in file_name:
            return cls.OTHER
        return cls.from_extension(file_name.rsplit(".", 1)[1])

    @classmethod
    def is_supported_extension(cls, extension: Optional[str]) -> bool:
        return cls.from_extension(extension) is not cls.OTHER


_EXTENSIONS = {
    FileCategory.IMAGE: frozenset(
        {"jpg", "jpeg", "png", "gif", "webp", "bmp", "svg", "ico", "tiff", "tif"}
    ),
    FileCategory.VIDEO: frozenset(
        {"mp4", "avi", "mov", "wmv", "mkv", "webm", "flv", "m4v", "mpeg", "mpg", "3gp"}
    ),
    FileCategory.AUDIO: frozenset(
        {"mp3", "wav", "flac", "aac", "ogg", "m4a", "wma", "opus", "aiff"}
    ),
    FileCategory.DOCUMENT: frozenset(
        {
            "pdf",
            "doc",
            "docx",
            "xls",
            "xlsx",
            "ppt",
            "pptx",
            "txt",
            "rtf",
            "csv",
            "md",
            "json",
            "xml",
            "html",
            "htm",
        }
    ),
    FileCategory.ARCHIVE: frozenset({"zip", "rar", "7z", "tar", "gz", "bz2", "xz", "tgz"}),
    FileCategory.OTHER: frozenset(),
}

# 按声明顺序匹配，application/* 中只有明确列出的文档与压缩类型才会被识别
_MEDIA_TYPE_PREFIXES = {
    FileCategory.IMAGE: frozenset({"image/"}),
    FileCategory.VIDEO: frozenset({"video/"}),
    FileCategory.AUDIO: frozenset({"audio/"}),
    FileCategory.DOCUMENT: frozenset(
        {
            "text/",
            "application/pdf",
            "application/msword",
            "application/vnd.ms-excel",
            "application/vnd.ms-powerpoint",
            "application/vnd.openxmlformats-officedocument",
            "application/rtf",
            "application/json",
            "application/xml",
        }
    ),
    FileCategory.ARCHIVE: frozenset(
        {
            "application/zip",
            "application/x-rar-compressed",
            "application/vnd.rar",
            "application/x-7z-compressed",
            "application/x-tar",
            "application/gzip",
            "application/x-gzip",
            "application/x-bzip2",
            "application/x-xz",
        }
    ),
    FileCategory.OTHER: frozenset(),
}
