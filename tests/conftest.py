# tests/conftest.py

from dataclasses import dataclass
from pathlib import Path
from typing import AsyncGenerator, Optional

import pytest
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

from account_admin.core.context import AppContext
from account_admin.core.log_config import setup_logging
from account_admin.core.security import get_password_hash
from account_admin.core.storage.local import LocalStorageProvider
from account_admin.core.storage.paths import TenantStoragePaths
from account_admin.dao.identity.account_dao import AccountDao
from account_admin.dao.resource.resource_dao import ResourceDao
from account_admin.dao.tenant.tenant_dao import TenantDao
from account_admin.db.base import Base
from account_admin.models import (
    Account, AccountState, AccountType, Resource, ResourceType, Tenant
)

setup_logging("DEBUG")

STORAGE_BASE = "/scheduler"

# ==============================================================================
# 1. 数据库 Fixtures
# ==============================================================================

@pytest.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """每个测试一个全新的内存数据库；StaticPool 保证所有会话共享同一个连接。"""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    TestSessionLocal = async_sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine, class_=AsyncSession
    )
    async with TestSessionLocal() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()

# ==============================================================================
# 2. 存储 Fixtures
# ==============================================================================

@dataclass
class StorageFiles:
    """Direct filesystem access below a local provider's root, for arranging and asserting."""
    root: Path

    def path(self, storage_path: str) -> Path:
        return self.root / storage_path.lstrip("/")

    def write(self, storage_path: str, content: str = "") -> None:
        target = self.path(storage_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

    def read(self, storage_path: str) -> str:
        return self.path(storage_path).read_text()

    def exists(self, storage_path: str) -> bool:
        return self.path(storage_path).exists()

    def mkdir(self, storage_path: str) -> None:
        self.path(storage_path).mkdir(parents=True, exist_ok=True)

@pytest.fixture
def storage(tmp_path) -> LocalStorageProvider:
    return LocalStorageProvider(root_dir=str(tmp_path / "storage"))

@pytest.fixture
def files(storage: LocalStorageProvider) -> StorageFiles:
    return StorageFiles(root=storage.root_dir)

@pytest.fixture
def storage_paths() -> TenantStoragePaths:
    return TenantStoragePaths(STORAGE_BASE)

@pytest.fixture
def app_context(db_session, storage, storage_paths) -> AppContext:
    """资源中心已启用的上下文。"""
    return AppContext(
        db=db_session,
        storage=storage,
        storage_paths=storage_paths,
        resource_upload_enabled=True,
    )

@pytest.fixture
def metadata_only_context(db_session, storage_paths) -> AppContext:
    """资源中心未启用：没有存储，只修改元数据。"""
    return AppContext(db=db_session, storage_paths=storage_paths, resource_upload_enabled=False)

# ==============================================================================
# 3. 数据工厂 Fixtures
# ==============================================================================

@pytest.fixture
def tenant_factory(db_session):
    async def _create(code: str) -> Tenant:
        return await TenantDao(db_session).add(Tenant(code=code, description=f"tenant {code}"))
    return _create

@pytest.fixture
def account_factory(db_session):
    async def _create(
        name: str,
        tenant: Optional[Tenant] = None,
        account_type: AccountType = AccountType.GENERAL,
        state: AccountState = AccountState.ACTIVE,
    ) -> Account:
        account = Account(
            name=name,
            password_hash=get_password_hash("secret"),
            email=f"{name}@example.com",
            tenant_id=tenant.id if tenant else None,
            account_type=account_type,
            state=state,
            queue="",
        )
        return await AccountDao(db_session).add(account)
    return _create

@pytest.fixture
async def admin(account_factory) -> Account:
    return await account_factory("admin", account_type=AccountType.ADMIN)

@pytest.fixture
def resource_factory(db_session, files: StorageFiles, storage_paths: TenantStoragePaths):
    """
    Creates a resource record. When `tenant` is given the physical file (or
    directory) is written into that tenant's category directory as well.
    """
    async def _create(
        owner: Account,
        full_name: str,
        is_directory: bool = False,
        parent: Optional[Resource] = None,
        resource_type: ResourceType = ResourceType.FILE,
        tenant: Optional[Tenant] = None,
        content: Optional[str] = None,
    ) -> Resource:
        resource = Resource(
            pid=parent.id if parent else None,
            name=full_name.rsplit("/", 1)[-1],
            full_name=full_name,
            is_directory=is_directory,
            type=resource_type,
            owner_id=owner.id,
            size=len(content or ""),
        )
        resource = await ResourceDao(db_session).add(resource)
        if tenant is not None:
            physical = f"{storage_paths.category_dir(tenant.code, resource_type)}/{full_name}"
            if is_directory:
                files.mkdir(physical)
            else:
                files.write(physical, content if content is not None else f"content of {full_name}")
        return resource
    return _create
