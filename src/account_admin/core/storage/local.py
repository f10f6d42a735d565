import logging
import shutil
from pathlib import Path
from typing import Optional

from account_admin.core.config import settings
from account_admin.services.exceptions import StorageConflictError, StorageUnavailableError
from .base import register_storage_provider, BaseStorageProvider, StorageType

logger = logging.getLogger(__name__)

@register_storage_provider
class LocalStorageProvider(BaseStorageProvider):
    """
    Filesystem-backed provider. Storage paths are mapped below `root_dir`,
    so "/scheduler/t1/resources/a.txt" lives at "<root_dir>/scheduler/t1/resources/a.txt".
    """
    name: str = StorageType.LOCAL.value

    def __init__(self, root_dir: Optional[str] = None):
        self.root_dir = Path(root_dir or settings.STORAGE_LOCAL_ROOT).resolve()

    def _resolve(self, path: str) -> Path:
        target = (self.root_dir / path.lstrip("/")).resolve()
        # 禁止通过 ".." 逃逸出根目录
        if not target.is_relative_to(self.root_dir):
            raise StorageUnavailableError(f"Path escapes storage root: {path}", operation="resolve", path=path)
        return target

    async def exists(self, path: str) -> bool:
        target = self._resolve(path)
        try:
            return await self._run_in_executor(target.exists)
        except OSError as e:
            raise StorageUnavailableError(f"exists check failed: {e}", operation="exists", path=path) from e

    async def mkdir(self, path: str) -> bool:
        target = self._resolve(path)
        try:
            await self._run_in_executor(target.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"mkdir failed: {e}", operation="mkdir", path=path) from e
        return True

    async def copy(self, src: str, dst: str, overwrite: bool = True, preserve_metadata: bool = True) -> bool:
        src_path = self._resolve(src)
        dst_path = self._resolve(dst)
        try:
            return await self._run_in_executor(self._copy_file, src_path, dst_path, overwrite, preserve_metadata)
        except FileExistsError as e:
            raise StorageConflictError(dst, operation="copy") from e
        except OSError as e:
            raise StorageUnavailableError(f"copy {src} -> {dst} failed: {e}", operation="copy", path=src) from e

    def _copy_file(self, src_path: Path, dst_path: Path, overwrite: bool, preserve_metadata: bool) -> bool:
        if dst_path.exists() and not overwrite:
            raise FileExistsError(f"Destination already exists: {dst_path}")
        dst_path.parent.mkdir(parents=True, exist_ok=True)
        if preserve_metadata:
            shutil.copy2(src_path, dst_path)
        else:
            shutil.copyfile(src_path, dst_path)
        return True

    async def delete(self, path: str, recursive: bool = False) -> bool:
        target = self._resolve(path)
        try:
            return await self._run_in_executor(self._delete, target, recursive)
        except OSError as e:
            raise StorageUnavailableError(f"delete failed: {e}", operation="delete", path=path) from e

    def _delete(self, target: Path, recursive: bool) -> bool:
        if not target.exists():
            return False
        if target.is_dir():
            if recursive:
                shutil.rmtree(target)
            else:
                # 非空目录会抛出 OSError
                target.rmdir()
        else:
            target.unlink()
        return True
