# tests/services/tenant/test_tenant_migration.py

import pytest
from sqlalchemy.exc import SQLAlchemyError

from account_admin.models import ResourceType
from account_admin.services.exceptions import (
    ResourceMissingError, ServiceException, StorageUnavailableError, TenantNotFoundError
)
from account_admin.services.tenant.migration_service import TenantMigrationService

pytestmark = pytest.mark.asyncio

@pytest.fixture
def migration_service(app_context) -> TenantMigrationService:
    return TenantMigrationService(app_context)

@pytest.fixture
async def t1(tenant_factory):
    return await tenant_factory("t1")

@pytest.fixture
async def t2(tenant_factory):
    return await tenant_factory("t2")

@pytest.fixture
async def moving_account(account_factory, resource_factory, files, t1):
    """
    An account in t1 owning "a.txt", "sub/b.txt" and one UDF jar, with the
    files present in t1's namespace and a populated home directory.
    """
    account = await account_factory("mover", tenant=t1)
    await resource_factory(account, "a.txt", tenant=t1, content="A")
    sub = await resource_factory(account, "sub", is_directory=True, tenant=t1)
    await resource_factory(account, "sub/b.txt", parent=sub, tenant=t1, content="B")
    await resource_factory(account, "udf.jar", resource_type=ResourceType.UDF, tenant=t1, content="JAR")
    files.write(f"/scheduler/t1/home/{account.id}/notes.txt", "home")
    return account

class TestTenantMigration:

    async def test_moves_resources_and_home(self, migration_service, db_session, files, moving_account, t1, t2):
        account = moving_account

        result = await migration_service.migrate(account, t2.id)

        assert files.read("/scheduler/t2/resources/a.txt") == "A"
        assert files.read("/scheduler/t2/resources/sub/b.txt") == "B"
        assert files.read("/scheduler/t2/udfs/udf.jar") == "JAR"
        assert not files.exists(f"/scheduler/t1/home/{account.id}")
        assert files.path(f"/scheduler/t2/home/{account.id}").is_dir()

        await db_session.refresh(account)
        assert account.tenant_id == t2.id
        assert result.old_tenant_id == t1.id
        assert result.new_tenant_id == t2.id
        assert result.storage_migrated is True
        assert set(result.replications) == {"file", "udf"}
        assert result.replications["file"].copied_files == [
            "/scheduler/t2/resources/a.txt", "/scheduler/t2/resources/sub/b.txt"
        ]

    async def test_missing_new_tenant_changes_nothing(self, migration_service, files, moving_account, t1):
        account = moving_account

        with pytest.raises(TenantNotFoundError):
            await migration_service.migrate(account, 9999)

        assert account.tenant_id == t1.id
        assert files.exists(f"/scheduler/t1/home/{account.id}/notes.txt")
        assert not files.exists("/scheduler/t2")

    async def test_first_assignment_skips_storage(self, migration_service, account_factory, files, t2):
        account = await account_factory("newcomer")

        result = await migration_service.migrate(account, t2.id)

        assert account.tenant_id == t2.id
        assert result.old_tenant_id is None
        assert result.storage_migrated is False
        assert not files.exists("/scheduler/t2")

    async def test_upload_disabled_only_updates_metadata(self, metadata_only_context, files, moving_account, t2):
        service = TenantMigrationService(metadata_only_context)

        result = await service.migrate(moving_account, t2.id)

        assert moving_account.tenant_id == t2.id
        assert result.storage_migrated is False
        assert not files.exists("/scheduler/t2")
        assert files.exists("/scheduler/t1/resources/a.txt")

    async def test_missing_old_namespace_is_provisioned(self, migration_service, account_factory, files, t1, t2):
        account = await account_factory("orphan", tenant=t1)

        result = await migration_service.migrate(account, t2.id)

        assert files.path("/scheduler/t1/resources").is_dir()
        assert files.path("/scheduler/t1/udfs").is_dir()
        assert files.path(f"/scheduler/t2/home/{account.id}").is_dir()
        assert account.tenant_id == t2.id
        assert result.replications == {}

    async def test_missing_resource_file_keeps_old_tenant(self, migration_service, files, moving_account, t1, t2):
        account = moving_account
        files.path("/scheduler/t1/resources/sub/b.txt").unlink()

        with pytest.raises(ResourceMissingError):
            await migration_service.migrate(account, t2.id)

        assert account.tenant_id == t1.id
        assert files.exists(f"/scheduler/t1/home/{account.id}/notes.txt")

    async def test_storage_outage_propagates_without_retry(
        self, migration_service, storage, files, monkeypatch, moving_account, t1, t2
    ):
        account = moving_account
        calls = []

        async def unavailable_copy(src, dst, *args, **kwargs):
            calls.append(src)
            raise StorageUnavailableError("storage offline", operation="copy", path=src)

        monkeypatch.setattr(storage, "copy", unavailable_copy)

        with pytest.raises(StorageUnavailableError):
            await migration_service.migrate(account, t2.id)

        assert len(calls) == 1
        assert account.tenant_id == t1.id
        assert files.read(f"/scheduler/t1/home/{account.id}/notes.txt") == "home"
        assert not files.exists(f"/scheduler/t2/home/{account.id}")

    async def test_failed_flush_is_compensated(
        self, migration_service, db_session, files, monkeypatch, moving_account, t1, t2
    ):
        account = moving_account
        plan = await migration_service.plan_migration(account, t2.id)

        async def failing_flush(*args, **kwargs):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(db_session, "flush", failing_flush)

        with pytest.raises(ServiceException) as exc_info:
            await migration_service.execute(plan)

        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)
        assert account.tenant_id == t1.id
        assert files.path(f"/scheduler/t1/home/{account.id}").is_dir()
        assert not files.exists(f"/scheduler/t2/home/{account.id}")
        # 已复制的资源文件保留在新租户下
        assert files.exists("/scheduler/t2/resources/a.txt")
