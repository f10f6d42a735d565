# tests/services/tenant/test_namespace_service.py

import pytest

from account_admin.services.tenant.namespace_service import TenantNamespaceService

pytestmark = pytest.mark.asyncio

@pytest.fixture
def namespace_service(app_context) -> TenantNamespaceService:
    return TenantNamespaceService(app_context)

class TestTenantNamespace:

    async def test_creates_tenant_layout(self, namespace_service, files):
        created = await namespace_service.ensure_tenant_namespace("t1")

        assert created == ["/scheduler/t1", "/scheduler/t1/resources", "/scheduler/t1/udfs"]
        assert files.path("/scheduler/t1/resources").is_dir()
        assert files.path("/scheduler/t1/udfs").is_dir()

    async def test_is_idempotent_and_non_destructive(self, namespace_service, files):
        files.write("/scheduler/t1/resources/keep.txt", "kept")

        created = await namespace_service.ensure_tenant_namespace("t1")

        assert created == ["/scheduler/t1/udfs"]
        assert await namespace_service.ensure_tenant_namespace("t1") == []
        assert files.read("/scheduler/t1/resources/keep.txt") == "kept"

class TestUserHome:

    async def test_ensure_user_home(self, namespace_service, files):
        assert await namespace_service.ensure_user_home("t1", 7) is True
        assert files.path("/scheduler/t1/home/7").is_dir()
        assert await namespace_service.ensure_user_home("t1", 7) is False

    async def test_delete_user_home_is_recursive(self, namespace_service, files):
        files.write("/scheduler/t1/home/7/nested/file.txt", "x")

        assert await namespace_service.delete_user_home("t1", 7) is True
        assert not files.exists("/scheduler/t1/home/7")
        assert await namespace_service.delete_user_home("t1", 7) is False

    async def test_requires_configured_storage(self, metadata_only_context):
        service = TenantNamespaceService(metadata_only_context)
        with pytest.raises(RuntimeError):
            await service.ensure_tenant_namespace("t1")
