# src/account_admin/services/permission/grant_service.py

import logging
from typing import Any, Callable, List

from account_admin.core.context import AppContext
from account_admin.dao.base_dao import BaseDao
from account_admin.dao.identity.account_dao import AccountDao
from account_admin.dao.permission.grant_dao import (
    GrantDao, ResourceGrantDao, ProjectGrantDao, DataSourceGrantDao, UdfGrantDao
)
from account_admin.dao.project.project_dao import ProjectDao, DataSourceDao, WorkflowDefinitionDao
from account_admin.dao.resource.resource_dao import ResourceDao, UdfFunctionDao
from account_admin.models import (
    Account, GrantPermission, ResourceGrant, ProjectGrant, DataSourceGrant, UdfGrant
)
from account_admin.schemas.permission.grant_schemas import GrantCategory, GrantRead, GrantResult
from account_admin.services.base_service import BaseService
from account_admin.services.exceptions import (
    AccountNotFoundError, PermissionDeniedError, ProjectNotFoundError, TargetNotFoundError
)
from .grant_planner import GrantPlan, build_usage_index, parse_target_ids, plan_grant_change

logger = logging.getLogger(__name__)

class GrantService(BaseService):
    """
    Replaces an account's grant set per category (resources, projects, data
    sources, UDF functions).

    Every grant call is all-or-nothing at the metadata level: the plan is
    validated and every requested target resolved before the old grants are
    deleted. The caller's transaction commits the flushed result.
    """

    def __init__(self, context: AppContext):
        self.context = context
        self.db = context.db
        self.account_dao = AccountDao(context.db)
        self.resource_dao = ResourceDao(context.db)
        self.project_dao = ProjectDao(context.db)
        self.data_source_dao = DataSourceDao(context.db)
        self.udf_function_dao = UdfFunctionDao(context.db)
        self.workflow_definition_dao = WorkflowDefinitionDao(context.db)
        self.resource_grant_dao = ResourceGrantDao(context.db)
        self.project_grant_dao = ProjectGrantDao(context.db)
        self.data_source_grant_dao = DataSourceGrantDao(context.db)
        self.udf_grant_dao = UdfGrantDao(context.db)

    # --- Public DTO-returning Methods ---

    async def grant_resources(self, account_id: int, resource_ids: Any) -> GrantResult:
        """
        Replaces the resource grants of an account.

        Ids may be given as ancestor chains ("1-4-9"). Revoking a resource that a
        released workflow definition of this account still uses fails with
        `TargetInUseError` and changes nothing. Directories are granted
        READABLE, files WRITABLE.
        """
        await self._get_account(account_id)
        requested = parse_target_ids(resource_ids, allow_path_ids=True)
        old_ids = await self.resource_grant_dao.list_target_ids(account_id)

        usage_index = {}
        if set(old_ids) - set(requested):
            # 只有存在待取消的授权时才需要加载工作流引用
            definitions = await self.workflow_definition_dao.list_released_with_resources(account_id)
            usage_index = build_usage_index(definitions)

        plan = plan_grant_change(requested, old_ids, usage_index)
        plan.ensure_allowed()

        resources = await self._resolve_targets(self.resource_dao, "resource", plan.requested)
        grants = [
            ResourceGrant(
                account_id=account_id,
                resource_id=resource.id,
                perm=GrantPermission.for_resource(resource.is_directory),
            )
            for resource in resources
        ]
        await self._replace_grants(self.resource_grant_dao, account_id, grants)
        return self._to_result(account_id, "resource", plan, grants, lambda g: g.resource_id)

    async def grant_projects(self, account_id: int, project_ids: Any) -> GrantResult:
        return await self._grant_simple(
            account_id, project_ids, "project", self.project_dao, self.project_grant_dao,
            lambda target_id: ProjectGrant(account_id=account_id, project_id=target_id, perm=GrantPermission.for_target()),
            lambda g: g.project_id,
        )

    async def grant_data_sources(self, account_id: int, data_source_ids: Any) -> GrantResult:
        return await self._grant_simple(
            account_id, data_source_ids, "data_source", self.data_source_dao, self.data_source_grant_dao,
            lambda target_id: DataSourceGrant(account_id=account_id, data_source_id=target_id, perm=GrantPermission.for_target()),
            lambda g: g.data_source_id,
        )

    async def grant_udf_functions(self, account_id: int, udf_ids: Any) -> GrantResult:
        return await self._grant_simple(
            account_id, udf_ids, "udf_function", self.udf_function_dao, self.udf_grant_dao,
            lambda target_id: UdfGrant(account_id=account_id, udf_id=target_id, perm=GrantPermission.for_target()),
            lambda g: g.udf_id,
        )

    async def grant_project_by_code(self, actor: Account, account_id: int, project_code: int) -> GrantRead:
        """
        Grants one project to an account without touching its other project grants.
        Only an administrator or the project's owner may do this.
        """
        await self._get_account(account_id)
        project = await self.project_dao.get_by_code(project_code)
        if not project:
            raise ProjectNotFoundError(project_code)
        if not actor.is_admin and actor.id != project.owner_id:
            raise PermissionDeniedError("Only administrators or the project owner can grant this project.")

        # 重复授权时先删除旧关系，保证每个 (account, project) 只有一条
        await self.project_grant_dao.delete_relation(account_id, project.id)
        grant = ProjectGrant(account_id=account_id, project_id=project.id, perm=GrantPermission.for_project_owner())
        await self.project_grant_dao.add(grant, auto_flush=False)
        await self.db.flush()
        return GrantRead(target_id=project.id, perm=grant.perm)

    async def revoke_project(self, actor: Account, account_id: int, project_code: int) -> None:
        self._ensure_admin(actor)
        await self._get_account(account_id)
        project = await self.project_dao.get_by_code(project_code)
        if not project:
            raise ProjectNotFoundError(project_code)
        await self.project_grant_dao.delete_relation(account_id, project.id)
        await self.db.flush()

    async def list_grants(self, account_id: int, category: GrantCategory) -> List[GrantRead]:
        dao, target_of = self._category_dao(category)
        grants = await dao.list_by_account(account_id)
        return [GrantRead(target_id=target_of(g), perm=g.perm) for g in grants]

    # --- Internal Helpers ---

    async def _grant_simple(
        self,
        account_id: int,
        raw_ids: Any,
        category: GrantCategory,
        target_dao: BaseDao,
        grant_dao: GrantDao,
        make_grant: Callable[[int], Any],
        target_of: Callable[[Any], int],
    ) -> GrantResult:
        """项目 / 数据源 / UDF 函数：无引用保护，全部授予 WRITABLE。"""
        await self._get_account(account_id)
        requested = parse_target_ids(raw_ids)
        old_ids = await grant_dao.list_target_ids(account_id)
        plan = plan_grant_change(requested, old_ids, {})

        targets = await self._resolve_targets(target_dao, category, plan.requested)
        grants = [make_grant(target.id) for target in targets]
        await self._replace_grants(grant_dao, account_id, grants)
        return self._to_result(account_id, category, plan, grants, target_of)

    async def _get_account(self, account_id: int) -> Account:
        account = await self.account_dao.get_by_pk(account_id)
        if not account:
            raise AccountNotFoundError(account_id)
        return account

    async def _resolve_targets(self, dao: BaseDao, target_type: str, ids: List[int]) -> list:
        """Loads every requested target, in request order; the first unknown id fails the call."""
        found = {target.id: target for target in await dao.get_by_pks(ids)}
        resolved = []
        for target_id in ids:
            target = found.get(target_id)
            if target is None:
                raise TargetNotFoundError(target_type, target_id)
            resolved.append(target)
        return resolved

    async def _replace_grants(self, grant_dao: GrantDao, account_id: int, grants: list) -> None:
        deleted = await grant_dao.delete_by_account(account_id)
        await grant_dao.add_all(grants, auto_flush=False)
        await self.db.flush()
        logger.info(
            f"account {account_id}: replaced {deleted} {grant_dao.model.__tablename__} rows with {len(grants)}"
        )

    def _to_result(
        self,
        account_id: int,
        category: GrantCategory,
        plan: GrantPlan,
        grants: list,
        target_of: Callable[[Any], int],
    ) -> GrantResult:
        return GrantResult(
            account_id=account_id,
            category=category,
            granted=[GrantRead(target_id=target_of(g), perm=g.perm) for g in grants],
            added_ids=sorted(plan.to_add),
            revoked_ids=sorted(plan.to_revoke),
        )

    def _category_dao(self, category: GrantCategory) -> tuple[GrantDao, Callable[[Any], int]]:
        if category == "resource":
            return self.resource_grant_dao, lambda g: g.resource_id
        if category == "project":
            return self.project_grant_dao, lambda g: g.project_id
        if category == "data_source":
            return self.data_source_grant_dao, lambda g: g.data_source_id
        if category == "udf_function":
            return self.udf_grant_dao, lambda g: g.udf_id
        raise ValueError(f"Unknown grant category '{category}'.")
