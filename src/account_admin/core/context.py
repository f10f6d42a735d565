# src/account_admin/core/context.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from account_admin.core.config import settings
from account_admin.core.storage.base import BaseStorageProvider
from account_admin.core.storage.factory import get_storage_provider
from account_admin.core.storage.paths import TenantStoragePaths

class AppContext(BaseModel):
    """
    Defines the complete, typed context for service layer operations.
    Everything a service needs beyond its arguments (session, storage,
    feature switches) is carried here instead of being read from globals.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    # 核心数据库会话
    db: AsyncSession

    # 远程资源存储；resource_upload_enabled 为 False 时可以为空
    storage: Optional[BaseStorageProvider] = None
    storage_paths: TenantStoragePaths = Field(default_factory=TenantStoragePaths)

    # 资源中心开关，由调用方在构造上下文时显式给出
    resource_upload_enabled: bool = False

    @classmethod
    def from_settings(cls, db: AsyncSession) -> "AppContext":
        enabled = settings.RESOURCE_UPLOAD_ENABLED
        return cls(
            db=db,
            storage=get_storage_provider() if enabled else None,
            storage_paths=TenantStoragePaths(settings.STORAGE_BASE_PATH),
            resource_upload_enabled=enabled,
        )

    @property
    def resource_storage(self) -> BaseStorageProvider:
        if self.storage is None:
            raise RuntimeError("Resource storage is required for this operation but none is configured.")
        return self.storage
