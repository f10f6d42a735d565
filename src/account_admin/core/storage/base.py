# src/account_admin/core/storage/base.py

import asyncio
from abc import ABC, abstractmethod
from functools import partial
from typing import Dict, Type, TypeVar
from enum import Enum

class StorageType(str, Enum):
    LOCAL = "local"
    ALIYUN_OSS = "aliyun_oss"

class BaseStorageProvider(ABC):
    """
    层级存储能力的抽象基类 (exists / mkdir / copy / delete)。
    所有具体实现（本地文件系统, OSS）必须继承此类并定义 `name` 属性。

    Paths are absolute, slash-delimited strings such as
    "/scheduler/tenant_a/resources/sub/b.txt". Implementations raise
    `StorageUnavailableError` when the backend call itself fails; a path that
    simply does not exist is reported through `exists`, never as an error.
    """
    name: str = "base"

    async def _run_in_executor(self, func, *args, **kwargs):
        """
        将同步 IO 操作放入线程池执行，避免阻塞 Async Event Loop
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """检查文件或目录是否存在。"""
        raise NotImplementedError

    @abstractmethod
    async def mkdir(self, path: str) -> bool:
        """
        创建目录（包括缺失的父目录）。幂等：目录已存在时直接返回 True。
        """
        raise NotImplementedError

    @abstractmethod
    async def copy(self, src: str, dst: str, overwrite: bool = True, preserve_metadata: bool = True) -> bool:
        """
        复制单个文件。目标的父目录不存在时自动创建。

        :param overwrite: 目标已存在时是否覆盖；为 False 且目标存在时抛出 StorageUnavailableError
        :param preserve_metadata: 是否保留源文件的元数据 (mtime / user metadata)
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, path: str, recursive: bool = False) -> bool:
        """
        删除文件或目录。路径不存在时返回 False，不视为错误。
        删除非空目录必须显式传入 recursive=True。
        """
        raise NotImplementedError

# 定义注册表
ALL_STORAGE_PROVIDERS: Dict[str, Type[BaseStorageProvider]] = {}

T = TypeVar('T', bound=BaseStorageProvider)

def register_storage_provider(cls: Type[T]) -> Type[T]:
    """
    装饰器：注册存储提供商实现类。
    """
    if not hasattr(cls, 'name') or not cls.name:
        raise ValueError(f"Storage provider class {cls.__name__} must define a 'name' attribute.")

    if cls.name in ALL_STORAGE_PROVIDERS:
        raise ValueError(f"Storage provider with name '{cls.name}' already registered.")

    ALL_STORAGE_PROVIDERS[cls.name] = cls
    return cls
