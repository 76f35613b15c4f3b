from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Response(BaseModel, Generic[T]):
    """基础API响应结构，继承自Pydantic的BaseModel，并使用泛型支持多种数据类型。"""

    code: int = 200  # 业务状态码，和HTTP状态码保持一致，200表示成功
    msg: str = "success"  # 响应消息提示
    data: Optional[T] = None  # 响应数据，类型为泛型T，可以为任意类型

    @staticmethod
    def success(data: Optional[T] = None, msg: str = "success", code: int = 200) -> "Response[T]":
        """创建一个表示成功的响应对象。

        Args:
            data (Optional[T]): 响应数据，默认为None。
            msg (str): 响应消息提示，默认为"success"。
            code (int): 业务状态码，上传成功等场景使用201。

        Returns:
            Response[T]: 表示成功的响应对象。
        """
        return Response[T](code=code, msg=msg, data=data)

    @staticmethod
    def fail(code: int = 400, msg: str = "fail", data: Optional[Any] = None) -> "Response[Any]":
        """创建一个表示失败的响应对象。"""
        return Response[Any](code=code, msg=msg, data=data)
