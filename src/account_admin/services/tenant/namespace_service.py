# src/account_admin/services/tenant/namespace_service.py

import logging
from typing import List

from account_admin.core.context import AppContext

logger = logging.getLogger(__name__)

class TenantNamespaceService:
    """
    Provisions tenant namespaces and per-account home directories in remote storage.
    Every method is idempotent and never removes anything it did not name.
    """

    def __init__(self, context: AppContext):
        self.context = context
        self.paths = context.storage_paths

    @property
    def storage(self):
        return self.context.resource_storage

    async def ensure_tenant_namespace(self, tenant_code: str) -> List[str]:
        """Creates the tenant root and its `resources` and `udfs` directories when absent."""
        created = []
        for path in (
            self.paths.tenant_dir(tenant_code),
            self.paths.resource_dir(tenant_code),
            self.paths.udf_dir(tenant_code),
        ):
            if not await self.storage.exists(path):
                await self.storage.mkdir(path)
                created.append(path)
        if created:
            logger.info(f"provisioned namespace for tenant '{tenant_code}': {created}")
        return created

    async def ensure_user_home(self, tenant_code: str, account_id: int) -> bool:
        home = self.paths.user_home(tenant_code, account_id)
        if await self.storage.exists(home):
            return False
        await self.storage.mkdir(home)
        logger.info(f"created user home {home}")
        return True

    async def delete_user_home(self, tenant_code: str, account_id: int) -> bool:
        home = self.paths.user_home(tenant_code, account_id)
        if not await self.storage.exists(home):
            return False
        await self.storage.delete(home, recursive=True)
        logger.info(f"deleted user home {home}")
        return True
