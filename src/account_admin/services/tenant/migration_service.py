# src/account_admin/services/tenant/migration_service.py

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from account_admin.core.context import AppContext
from account_admin.dao.resource.resource_dao import ResourceDao
from account_admin.dao.tenant.tenant_dao import TenantDao
from account_admin.models import Account, ResourceType, Tenant
from account_admin.schemas.tenant.tenant_schemas import ReplicationSummary, TenantMigrationResult
from account_admin.services.exceptions import ServiceException, TenantNotFoundError
from account_admin.services.resource.replicator import replicate_forest
from account_admin.services.resource.tree import ResourceNode, build_resource_forest
from .namespace_service import TenantNamespaceService

logger = logging.getLogger(__name__)

@dataclass
class MigrationPlan:
    """Everything resolved before the first side effect of a tenant move."""
    account: Account
    old_tenant: Optional[Tenant]
    new_tenant: Tenant
    forests: Dict[ResourceType, List[ResourceNode]] = field(default_factory=dict)
    # False: 首次分配租户、租户未变或资源中心未启用
    requires_storage: bool = False

    @property
    def old_tenant_id(self) -> Optional[int]:
        return self.old_tenant.id if self.old_tenant else None

class TenantMigrationService:
    """
    Moves an account from one tenant to another.

    The move runs in three steps. `plan_migration` resolves both tenants and
    loads the account's resource forests without side effects.
    `apply_storage_changes` copies the resources, drops the old home and
    provisions the new one. `execute` then writes the new tenant reference and
    flushes. Storage is never part of the database transaction: if the flush
    fails, a compensation step restores the old home and removes the new one,
    while copied resource files stay in the new namespace.
    """

    def __init__(self, context: AppContext):
        self.context = context
        self.db = context.db
        self.paths = context.storage_paths
        self.tenant_dao = TenantDao(context.db)
        self.resource_dao = ResourceDao(context.db)
        self.namespace_service = TenantNamespaceService(context)

    async def migrate(self, account: Account, new_tenant_id: int) -> TenantMigrationResult:
        plan = await self.plan_migration(account, new_tenant_id)
        return await self.execute(plan)

    async def plan_migration(self, account: Account, new_tenant_id: int) -> MigrationPlan:
        new_tenant = await self.tenant_dao.get_by_pk(new_tenant_id)
        if not new_tenant:
            raise TenantNotFoundError(new_tenant_id)

        old_tenant = None
        if account.tenant_id is not None:
            old_tenant = await self.tenant_dao.get_by_pk(account.tenant_id)

        plan = MigrationPlan(account=account, old_tenant=old_tenant, new_tenant=new_tenant)
        if old_tenant is None or old_tenant.id == new_tenant.id:
            return plan
        if not self.context.resource_upload_enabled:
            logger.info(f"resource upload disabled, account {account.id} changes tenant without moving files")
            return plan

        plan.requires_storage = True
        for resource_type in (ResourceType.FILE, ResourceType.UDF):
            records = await self.resource_dao.list_by_owner(account.id, resource_type)
            plan.forests[resource_type] = build_resource_forest(records)
        return plan

    async def apply_storage_changes(self, plan: MigrationPlan) -> Dict[str, ReplicationSummary]:
        storage = self.context.resource_storage
        old_code = plan.old_tenant.code
        new_code = plan.new_tenant.code
        account_id = plan.account.id
        replications: Dict[str, ReplicationSummary] = {}

        if await storage.exists(self.paths.resource_dir(old_code)):
            for resource_type, forest in plan.forests.items():
                if not forest:
                    continue
                report = await replicate_forest(
                    storage,
                    forest,
                    self.paths.category_dir(old_code, resource_type),
                    self.paths.category_dir(new_code, resource_type),
                )
                replications[resource_type.value] = ReplicationSummary(
                    copied_files=report.copied_files,
                    created_directories=report.created_directories,
                )
            await self.namespace_service.delete_user_home(old_code, account_id)
        else:
            # TODO: confirm whether a missing old namespace should be repaired or reported as a provisioning fault
            logger.warning(f"namespace of old tenant '{old_code}' not found, provisioning it instead of migrating")
            await self.namespace_service.ensure_tenant_namespace(old_code)

        await self.namespace_service.ensure_tenant_namespace(new_code)
        await self.namespace_service.ensure_user_home(new_code, account_id)
        return replications

    async def execute(self, plan: MigrationPlan) -> TenantMigrationResult:
        replications: Dict[str, ReplicationSummary] = {}
        if plan.requires_storage:
            replications = await self.apply_storage_changes(plan)

        account = plan.account
        account.tenant_id = plan.new_tenant.id
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error(f"failed to persist tenant change of account {account.id}: {e}")
            account.tenant_id = plan.old_tenant_id
            if plan.requires_storage:
                await self._compensate(plan)
            raise ServiceException(f"Failed to move account {account.id} to tenant {plan.new_tenant.id}.") from e

        logger.info(f"account {account.id} moved from tenant {plan.old_tenant_id} to {plan.new_tenant.id}")
        return TenantMigrationResult(
            account_id=account.id,
            old_tenant_id=plan.old_tenant_id,
            new_tenant_id=plan.new_tenant.id,
            storage_migrated=plan.requires_storage,
            replications=replications,
        )

    async def _compensate(self, plan: MigrationPlan) -> None:
        account_id = plan.account.id
        try:
            await self.namespace_service.ensure_user_home(plan.old_tenant.code, account_id)
            await self.namespace_service.delete_user_home(plan.new_tenant.code, account_id)
        except ServiceException:
            logger.exception(f"compensation for account {account_id} failed, storage needs manual cleanup")
            return
        logger.warning(f"compensated storage changes of account {account_id}; copied resources remain under tenant '{plan.new_tenant.code}'")
