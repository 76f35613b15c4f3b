from typing import BinaryIO, Protocol


class FileStorage(Protocol):
    """文件存储协议，定位符由存储端生成，调用方只能原样交还给同一个存储端"""

    def save(self, name: str, stream: BinaryIO, size: int) -> str:
        """将字节流保存为指定名字的文件，返回存储定位符"""
        ...

    def load(self, locator: str) -> BinaryIO:
        """打开完整文件字节流，调用方负责关闭"""
        ...

    def load_partial(self, locator: str, start: int, end: int) -> BinaryIO:
        """打开[start, end]闭区间的字节流，调用方负责关闭"""
        ...

    def delete(self, locator: str) -> None:
        """删除文件，文件不存在时不报错"""
        ...

    def exists(self, locator: str) -> bool:
        """判断文件是否存在"""
        ...

    def size(self, locator: str) -> int:
        """获取文件大小，文件不存在时抛出NotFoundError"""
        ...
