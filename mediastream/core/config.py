from functools import lru_cache
from typing import FrozenSet, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from mediastream.domain.models.file_category import FileCategory


class Settings(BaseSettings):
    """应用程序的配置设置，继承自Pydantic的BaseSettings。从.env或者环境变量中加载配置。"""

    # 项目基础配置
    env: str = "development"  # 应用环境，默认为'development'
    log_level: str = "INFO"  # 日志级别，默认为'INFO'

    # 本地存储配置
    storage_base_path: str = "./mediastream-data"  # 文件存储根目录
    max_file_size: int = 104857600  # 单文件大小上限(字节)，0表示不限制，默认100MB
    allowed_categories: str = ""  # 允许上传的分类，逗号分隔，空表示全部允许

    # 缩略图配置
    thumbnail_enabled: bool = True
    thumbnail_width: int = 320
    thumbnail_height: int = 180
    ffmpeg_enabled: bool = True  # 是否注册FFmpeg视频缩略图生成器
    ffmpeg_path: str = "ffmpeg"
    ffmpeg_timeout_seconds: int = 30

    # 元数据存储配置
    metadata_backend: str = "database"  # memory或database
    sqlalchemy_database_url: str = "sqlite:///./mediastream-data/mediastream.db"

    # API配置
    api_base_path: str = "/api/mediastream"
    public_base_url: Optional[str] = None  # 对外暴露的基础地址，用于拼接流地址与缩略图地址

    # 使用pydantic v2的写法来完成环境变量信息的告知
    model_config = SettingsConfigDict(
        env_prefix="MEDIASTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def allowed_category_set(self) -> FrozenSet[FileCategory]:
        """解析允许上传的分类集合，空集合表示全部允许"""
        categories = set()
        for raw in self.allowed_categories.split(","):
            value = raw.strip().lower()
            if value:
                categories.add(FileCategory(value))
        return frozenset(categories)


@lru_cache()
def get_settings() -> Settings:
    """获取应用程序的配置设置实例，使用lru_cache进行缓存以提高性能。

    Returns:
        Settings: 应用程序的配置设置实例。
    """
    return Settings()
