import logging
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .file_record import FileRecord

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class StreamableContent(BaseModel):
    """可流式输出的文件内容，包含字节流、文件记录以及可选的Range窗口

    字节流持有底层文件句柄，调用方必须在所有退出路径上释放，推荐用法:

        with stream_service.stream(file_id, range_header) as content:
            for chunk in content.iter_chunks():
                ...
    """

    stream: Any
    record: FileRecord
    content_length: int = Field(ge=0)
    range_start: Optional[int] = None
    range_end: Optional[int] = None
    media_type_override: Optional[str] = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def _validate_stream(self) -> "StreamableContent":
        if self.stream is None:
            raise ValueError("stream不能为空")
        if (self.range_start is None) != (self.range_end is None):
            raise ValueError("range_start与range_end必须同时提供")
        return self

    @classmethod
    def full(cls, record: FileRecord, stream: Any) -> "StreamableContent":
        """完整文件内容，对应HTTP 200"""
        return cls(stream=stream, record=record, content_length=record.size)

    @classmethod
    def partial(cls, record: FileRecord, stream: Any, start: int, end: int) -> "StreamableContent":
        """Range部分内容，对应HTTP 206"""
        return cls(
            stream=stream,
            record=record,
            content_length=end - start + 1,
            range_start=start,
            range_end=end,
        )

    def is_partial(self) -> bool:
        return self.range_start is not None

    def content_range_header(self) -> Optional[str]:
        """Content-Range头的值，格式为 bytes {start}-{end}/{total}，完整内容时返回None"""
        if not self.is_partial():
            return None
        return f"bytes {self.range_start}-{self.range_end}/{self.record.size}"

    @property
    def media_type(self) -> str:
        return self.media_type_override or self.record.media_type

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """按块读取字节流，无论正常结束、异常还是提前中断都会关闭字节流"""
        try:
            while True:
                chunk = self.stream.read(chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            self.close()

    def read_all(self) -> bytes:
        with self:
            return self.stream.read()

    def close(self) -> None:
        try:
            self.stream.close()
        except Exception:
            logger.warning("关闭文件字节流失败: %s", self.record.id, exc_info=True)

    def __enter__(self) -> "StreamableContent":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
