from typing import Any, Optional

from mediastream.domain.models.file_record import format_size


class AppException(RuntimeError):
    """基础应用异常类，继承RuntimeError，所有领域失败的统一根类型"""

    def __init__(
        self,
        code: int = 400,
        status_code: int = 400,
        msg: str = "应用程序异常",
        data: Any = None,
    ):
        """构造函数，完成错误数据初始化"""
        self.code = code
        self.status_code = status_code
        self.msg = msg
        self.data = data
        super().__init__(msg)


class BadRequestError(AppException):
    """客户端请求错误异常"""

    def __init__(self, msg: str = "错误的请求"):
        super().__init__(code=400, status_code=400, msg=msg)


class NotFoundError(AppException):
    """资源未找到异常，文件记录或存储字节不存在时抛出"""

    def __init__(self, msg: str = "资源未找到", file_id: Any = None, locator: Optional[str] = None):
        self.file_id = file_id
        self.locator = locator
        data: dict[str, str] = {}
        if file_id is not None:
            data["file_id"] = str(file_id)
        if locator is not None:
            data["locator"] = locator
        super().__init__(code=404, status_code=404, msg=msg, data=data or None)

    @classmethod
    def for_file(cls, file_id: Any) -> "NotFoundError":
        return cls(f"该文件[{file_id}]不存在", file_id=file_id)

    @classmethod
    def for_locator(cls, locator: str) -> "NotFoundError":
        return cls(f"存储中不存在该文件: {locator}", locator=locator)


class UnsupportedTypeError(AppException):
    """不允许的文件类型异常"""

    def __init__(
        self,
        msg: str = "不支持的文件类型",
        extension: str = "",
        media_type: Optional[str] = None,
        category: Optional[str] = None,
    ):
        self.extension = extension
        self.media_type = media_type
        self.category = category
        super().__init__(
            code=415,
            status_code=415,
            msg=msg,
            data={
                "extension": extension,
                "media_type": media_type,
                "category": category,
            },
        )


class SizeExceededError(AppException):
    """文件大小超出上限异常"""

    def __init__(self, actual_size: int, max_size: int, file_name: Optional[str] = None):
        self.actual_size = actual_size
        self.max_size = max_size
        self.file_name = file_name
        if file_name:
            msg = (
                f"文件[{file_name}]大小 {format_size(actual_size)} "
                f"超出允许的最大值 {format_size(max_size)}"
            )
        else:
            msg = f"文件大小 {format_size(actual_size)} 超出允许的最大值 {format_size(max_size)}"
        super().__init__(
            code=413,
            status_code=413,
            msg=msg,
            data={
                "actual_size": actual_size,
                "max_size": max_size,
                "file_name": file_name,
            },
        )

    @property
    def exceeded_by(self) -> int:
        return self.actual_size - self.max_size


class StorageError(AppException):
    """存储层I/O异常，携带失败的操作和定位符"""

    def __init__(
        self,
        operation: str,
        locator: str,
        cause: Optional[BaseException] = None,
        msg: Optional[str] = None,
    ):
        self.operation = operation
        self.locator = locator
        self.cause = cause
        detail = msg or f"存储操作[{operation}]失败: {locator}"
        if cause is not None and msg is None:
            detail = f"{detail} ({cause})"
        super().__init__(
            code=500,
            status_code=500,
            msg=detail,
            data={"operation": operation, "locator": locator},
        )


class ThumbnailError(AppException):
    """缩略图生成失败或没有可用的生成器"""

    def __init__(self, msg: str = "缩略图生成失败", file_id: Any = None):
        self.file_id = file_id
        super().__init__(
            code=500,
            status_code=500,
            msg=msg,
            data={"file_id": str(file_id)} if file_id is not None else None,
        )


class InvalidRangeError(AppException):
    """非法的Range请求"""

    def __init__(self, range_value: Optional[str], total_size: Optional[int] = None):
        self.range_value = range_value
        self.total_size = total_size
        super().__init__(
            code=416,
            status_code=416,
            msg=f"无效的Range请求: {range_value}",
            data={"range": range_value, "total_size": total_size},
        )


class InvalidPathError(AppException):
    """存储路径逃逸出基础目录"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            code=400,
            status_code=400,
            msg=f"非法的文件路径: {path}",
            data={"path": path},
        )
