"""文件类型识别领域服务

根据文件名（扩展名）或者声明的media-type识别文件分类，无法识别时降级为OTHER，
不会抛出异常。严格的类型限制由上传服务的白名单校验负责。
"""

from typing import Dict, Optional

from mediastream.domain.models.file_category import FileCategory

DEFAULT_MEDIA_TYPE = "application/octet-stream"

EXTENSION_TO_MEDIA_TYPE: Dict[str, str] = {
    # 图片
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "tiff": "image/tiff",
    "tif": "image/tiff",
    # 视频
    "mp4": "video/mp4",
    "avi": "video/x-msvideo",
    "mov": "video/quicktime",
    "wmv": "video/x-ms-wmv",
    "mkv": "video/x-matroska",
    "webm": "video/webm",
    "flv": "video/x-flv",
    "m4v": "video/x-m4v",
    "mpeg": "video/mpeg",
    "mpg": "video/mpeg",
    "3gp": "video/3gpp",
    # 音频
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "flac": "audio/flac",
    "aac": "audio/aac",
    "ogg": "audio/ogg",
    "m4a": "audio/mp4",
    "wma": "audio/x-ms-wma",
    "opus": "audio/opus",
    "aiff": "audio/aiff",
    # 文档
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "txt": "text/plain",
    "rtf": "application/rtf",
    "csv": "text/csv",
    "md": "text/markdown",
    "json": "application/json",
    "xml": "application/xml",
    "html": "text/html",
    "htm": "text/html",
    # 压缩包
    "zip": "application/zip",
    "rar": "application/x-rar-compressed",
    "7z": "application/x-7z-compressed",
    "tar": "application/x-tar",
    "gz": "application/gzip",
    "bz2": "application/x-bzip2",
    "xz": "application/x-xz",
    "tgz": "application/gzip",
}


class FileTypeDetector:
    """文件类型识别器"""

    def extract_extension(self, file_name: Optional[str]) -> str:
        """提取小写扩展名，没有扩展名或以点号结尾时返回空字符串"""
        if not file_name or not file_name.strip():
            return ""
        index = file_name.rfind(".")
        if index == -1 or index == len(file_name) - 1:
            return ""
        return file_name[index + 1 :].lower()

    def detect(self, file_name: Optional[str], media_type: Optional[str] = None) -> FileCategory:
        """识别文件分类，扩展名优先，扩展名无法识别时再使用media-type"""
        # 1.优先使用扩展名判断
        category = FileCategory.from_extension(self.extract_extension(file_name))
        if category is not FileCategory.OTHER or media_type is None:
            return category

        # 2.扩展名无法识别，使用声明的media-type重试
        return FileCategory.from_media_type(media_type)

    def media_type_for(self, extension: Optional[str]) -> str:
        """根据扩展名获取media-type，未知扩展名返回application/octet-stream"""
        if not extension:
            return DEFAULT_MEDIA_TYPE
        return EXTENSION_TO_MEDIA_TYPE.get(extension.strip().lower().lstrip("."), DEFAULT_MEDIA_TYPE)

    def is_supported(self, file_name: Optional[str], media_type: Optional[str] = None) -> bool:
        """OTHER视为不支持"""
        return self.detect(file_name, media_type) is not FileCategory.OTHER
