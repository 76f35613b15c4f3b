"""HTTP Range 请求的字节窗口模型"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from mediastream.application.errors.exceptions import InvalidRangeError

RANGE_UNIT_PREFIX = "bytes="


class ByteRange(BaseModel):
    """闭区间字节窗口 [start, end]"""

    start: int
    end: int

    model_config = ConfigDict(frozen=True)

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, total_size: int) -> str:
        return f"bytes {self.start}-{self.end}/{total_size}"

    @staticmethod
    def is_byte_range(range_value: Optional[str]) -> bool:
        """是否为bytes单位的Range值，其他单位的Range应当被忽略"""
        return range_value is not None and range_value.strip().lower().startswith(RANGE_UNIT_PREFIX)

    @classmethod
    def parse(cls, range_value: Optional[str], total_size: int) -> "ByteRange":
        """根据文件总大小解析单个Range值

        支持的格式:
            bytes=-N   最后N个字节
            bytes=N-   从N到文件末尾
            bytes=N-M  从N到M（包含M）

        Args:
            range_value: Range请求头的值
            total_size: 文件总大小

        Returns:
            ByteRange: 裁剪到文件范围内的字节窗口

        Raises:
            InvalidRangeError: 格式错误、多个区间、或者起始位置大于结束位置
        """
        if range_value is None or not range_value.strip().lower().startswith(RANGE_UNIT_PREFIX):
            raise InvalidRangeError(range_value, total_size)

        window = range_value.strip()[len(RANGE_UNIT_PREFIX) :].strip()
        # 只支持单个连续区间
        if "," in window or "-" not in window:
            raise InvalidRangeError(range_value, total_size)

        first, _, last = window.partition("-")
        first, last = first.strip(), last.strip()
        last_index = total_size - 1

        try:
            if not first:
                # 1.后缀区间: bytes=-500
                if not last:
                    raise InvalidRangeError(range_value, total_size)
                suffix = int(last)
                if suffix < 0:
                    raise InvalidRangeError(range_value, total_size)
                start = max(0, total_size - suffix)
                end = last_index
            elif not last:
                # 2.开放区间: bytes=1024-
                start = int(first)
                end = last_index
            else:
                # 3.闭区间: bytes=0-1023
                start = int(first)
                end = int(last)
        except ValueError as e:
            raise InvalidRangeError(range_value, total_size) from e

        # 4.裁剪到文件范围内
        start = max(0, start)
        end = min(end, last_index)

        if start > end:
            raise InvalidRangeError(range_value, total_size)

        return cls(start=start, end=end)
