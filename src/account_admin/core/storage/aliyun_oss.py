import logging
from typing import List

import oss2  # type: ignore
from account_admin.core.config import settings
from account_admin.services.exceptions import StorageConflictError, StorageUnavailableError
from .base import register_storage_provider, BaseStorageProvider, StorageType

logger = logging.getLogger(__name__)

# OSS 批量删除接口单次最多 1000 个 Key
_BATCH_DELETE_LIMIT = 1000

@register_storage_provider
class AliyunOSSProvider(BaseStorageProvider):
    """
    OSS 是扁平的对象存储，这里用 Key 前缀模拟目录：
    目录 "/a/b" 对应一个占位对象 "a/b/"，其下的文件为 "a/b/<name>"。
    """
    name: str = StorageType.ALIYUN_OSS.value

    def __init__(self):
        # 阿里云 OSS2 库是同步的，需要专门的 Auth 实例
        self.auth = oss2.Auth(settings.STORAGE_ACCESS_KEY, settings.STORAGE_SECRET_KEY)
        self.bucket_name = settings.STORAGE_BUCKET
        self.endpoint = settings.STORAGE_ENDPOINT
        # 初始化 Bucket 对象 (轻量级，不涉及网络请求)
        self.bucket = oss2.Bucket(self.auth, self.endpoint, self.bucket_name)

    @staticmethod
    def _key(path: str) -> str:
        return path.strip("/")

    @staticmethod
    def _dir_key(path: str) -> str:
        return path.strip("/") + "/"

    def _exists(self, path: str) -> bool:
        key = self._key(path)
        if self.bucket.object_exists(key):
            return True
        # 目录：占位对象或任意子对象存在即可
        result = self.bucket.list_objects(prefix=self._dir_key(path), max_keys=1)
        return bool(result.object_list)

    async def exists(self, path: str) -> bool:
        try:
            return await self._run_in_executor(self._exists, path)
        except oss2.exceptions.OssError as e:
            logger.error(f"OSS Exists Check Error: {str(e)} Path: {path}")
            raise StorageUnavailableError(f"OSS exists check failed: {e}", operation="exists", path=path) from e

    async def mkdir(self, path: str) -> bool:
        try:
            if await self._run_in_executor(self._exists, path):
                return True
            await self._run_in_executor(self.bucket.put_object, self._dir_key(path), b"")
            return True
        except oss2.exceptions.OssError as e:
            logger.error(f"OSS Mkdir Error: {str(e)} Path: {path}")
            raise StorageUnavailableError(f"OSS mkdir failed: {e}", operation="mkdir", path=path) from e

    async def copy(self, src: str, dst: str, overwrite: bool = True, preserve_metadata: bool = True) -> bool:
        src_key, dst_key = self._key(src), self._key(dst)
        try:
            if not overwrite and await self._run_in_executor(self.bucket.object_exists, dst_key):
                raise StorageConflictError(dst, operation="copy")
            # COPY 指令沿用源对象元数据；REPLACE 则丢弃
            headers = {"x-oss-metadata-directive": "COPY" if preserve_metadata else "REPLACE"}
            await self._run_in_executor(self.bucket.copy_object, self.bucket_name, src_key, dst_key, headers=headers)
            return True
        except oss2.exceptions.OssError as e:
            logger.error(f"OSS Copy Error: {str(e)} {src} -> {dst}")
            raise StorageUnavailableError(f"OSS copy failed: {e}", operation="copy", path=src) from e

    def _list_keys(self, prefix: str) -> List[str]:
        return [obj.key for obj in oss2.ObjectIterator(self.bucket, prefix=prefix)]

    def _delete(self, path: str, recursive: bool) -> bool:
        key = self._key(path)
        keys: List[str] = []
        if self.bucket.object_exists(key):
            keys.append(key)
        dir_key = self._dir_key(path)
        children = self._list_keys(dir_key)
        # 目录占位对象本身不算子对象
        if not recursive and any(k != dir_key for k in children):
            raise StorageUnavailableError(f"Directory is not empty: {path}", operation="delete", path=path)
        keys.extend(children)
        if not keys:
            return False
        for i in range(0, len(keys), _BATCH_DELETE_LIMIT):
            self.bucket.batch_delete_objects(keys[i:i + _BATCH_DELETE_LIMIT])
        return True

    async def delete(self, path: str, recursive: bool = False) -> bool:
        try:
            return await self._run_in_executor(self._delete, path, recursive)
        except oss2.exceptions.OssError as e:
            logger.error(f"OSS Delete Error: {str(e)} Path: {path}")
            raise StorageUnavailableError(f"OSS delete failed: {e}", operation="delete", path=path) from e
