from abc import ABC, abstractmethod
from typing import Dict, List, Tuple


class StorageClientInterface(ABC):
    """
    一个抽象基类 (ABC)，定义了所有存储客户端必须实现的统一接口。
    这确保了 ImageService 可以与任何存储后端以相同的方式进行交互，
    测试中也可以直接替换为内存实现。
    """

    @property
    @abstractmethod
    def bucket_name(self) -> str:
        """当前客户端操作的存储桶名称。"""
        pass

    @abstractmethod
    def put_object(self, object_name: str, data: bytes, content_type: str) -> None:
        """
        上传一个对象（文件）。单次尝试，不重试。
        :raises StorageWriteFailureException: 传输、认证、配额等任何后端错误。
        """
        pass

    @abstractmethod
    def remove_object(self, object_name: str) -> None:
        """
        删除一个对象。
        :raises StorageDeleteFailureException: 后端错误。
        """
        pass

    @abstractmethod
    def get_object(self, object_name: str) -> Tuple[bytes, str]:
        """
        读取对象内容。
        :return: (bytes, content_type)
        :raises BlobNotFoundException: 对象不存在。
        """
        pass

    @abstractmethod
    def object_exists(self, object_name: str) -> bool:
        """检查对象是否存在。"""
        pass

    @abstractmethod
    def list_objects(self, prefix: str = "") -> List[Dict]:
        """列出对象。"""
        pass

    @abstractmethod
    def build_final_url(self, object_name: str) -> str:
        """构建最终的可公开访问 URL。纯函数，无 I/O。"""
        pass
