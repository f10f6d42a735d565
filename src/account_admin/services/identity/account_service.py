# src/account_admin/services/identity/account_service.py

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from account_admin.core.config import settings
from account_admin.core.context import AppContext
from account_admin.core.security import get_password_hash
from account_admin.dao.identity.account_dao import AccountDao, AccessTokenDao
from account_admin.dao.permission.grant_dao import (
    ResourceGrantDao, ProjectGrantDao, DataSourceGrantDao, UdfGrantDao
)
from account_admin.dao.project.project_dao import ProjectDao
from account_admin.dao.tenant.tenant_dao import TenantDao
from account_admin.models import Account, AccountState, AccountType, Tenant
from account_admin.schemas.identity.account_schemas import (
    AccountCreate, AccountUpdate, AccountRegister, AccountRead,
    ActivationFailure, BatchActivationResult, PaginatedAccountsResponse
)
from account_admin.services.base_service import BaseService
from account_admin.services.exceptions import (
    ServiceException,
    AccountNotFoundError,
    AccountNameExistsError,
    InvalidParameterError,
    PermissionDeniedError,
    ProjectOwnershipError,
    TenantNotFoundError,
)
from account_admin.services.tenant.migration_service import MigrationPlan, TenantMigrationService
from account_admin.services.tenant.namespace_service import TenantNamespaceService

logger = logging.getLogger(__name__)

class AccountService(BaseService):
    def __init__(self, context: AppContext):
        self.context = context
        self.db = context.db
        self.account_dao = AccountDao(context.db)
        self.access_token_dao = AccessTokenDao(context.db)
        self.tenant_dao = TenantDao(context.db)
        self.project_dao = ProjectDao(context.db)
        self.grant_daos = [
            ResourceGrantDao(context.db),
            ProjectGrantDao(context.db),
            DataSourceGrantDao(context.db),
            UdfGrantDao(context.db),
        ]
        self.namespace_service = TenantNamespaceService(context)
        self.migration_service = TenantMigrationService(context)

    # --- Public DTO-returning "Wrapper" Methods ---

    async def create_account(self, actor: Account, data: AccountCreate) -> AccountRead:
        self._ensure_admin(actor)
        account = await self._create_account(data)
        return await self._to_read(account)

    async def update_account(self, actor: Account, account_id: int, data: AccountUpdate) -> AccountRead:
        self._ensure_admin_or_self(actor, account_id)
        account = await self._update_account(actor, account_id, data)
        return await self._to_read(account)

    async def register_account(self, data: AccountRegister) -> AccountRead:
        """Self-service sign-up. The account starts PENDING in the default tenant until an admin activates it."""
        if data.password != data.repeat_password:
            raise InvalidParameterError("Two passwords are not the same.")
        await self._ensure_name_available(data.name)

        account = Account(
            name=data.name,
            password_hash=get_password_hash(data.password),
            email=data.email,
            tenant_id=settings.DEFAULT_TENANT_ID,
            account_type=AccountType.GENERAL,
            state=AccountState.PENDING,
            queue="",
        )
        await self._persist(account)
        logger.info(f"account '{account.name}' registered, waiting for activation")
        return await self._to_read(account)

    async def activate_account(self, actor: Account, name: str) -> AccountRead:
        self._ensure_admin(actor)
        account = await self._activate(name)
        return await self._to_read(account)

    async def batch_activate_accounts(self, actor: Account, names: List[str]) -> BatchActivationResult:
        """Activates each name independently; one failure does not stop the others."""
        self._ensure_admin(actor)
        result = BatchActivationResult()
        for name in names:
            try:
                await self._activate(name)
            except ServiceException as e:
                result.failed.append(ActivationFailure(name=name, msg=e.message))
            else:
                result.succeeded.append(name)
        return result

    async def verify_account_name(self, name: str) -> bool:
        """True when the name is still free."""
        return await self.account_dao.get_by_name(name) is None

    async def get_account(self, account_id: int) -> AccountRead:
        account = await self._get_account(account_id)
        return AccountRead.model_validate(account)

    async def list_general_accounts(self, actor: Account) -> List[AccountRead]:
        self._ensure_admin(actor)
        accounts = await self.account_dao.list_general_accounts()
        return [AccountRead.model_validate(a) for a in accounts]

    async def list_accounts(
        self, actor: Account, search_val: Optional[str] = None, page: int = 1, page_size: int = 10
    ) -> PaginatedAccountsResponse:
        """Admin-only account search by name fragment, one page at a time."""
        self._ensure_admin(actor)
        if page < 1 or page_size < 1:
            raise InvalidParameterError("page and page_size must be positive.")

        total = await self.account_dao.count_by_name(search_val)
        accounts = await self.account_dao.search_by_name(search_val, page=page, limit=page_size)
        return PaginatedAccountsResponse(
            items=[AccountRead.model_validate(a) for a in accounts], total=total, page=page, limit=page_size
        )

    async def delete_account(self, actor: Account, account_id: int) -> None:
        """
        Deletes a general account together with its access tokens, grants and
        (when resource upload is enabled) its home directory.

        :raises ProjectOwnershipError: The account still owns projects.
        """
        self._ensure_admin(actor)
        account = await self._get_account(account_id)

        projects = await self.project_dao.list_created_by(account_id)
        if projects:
            raise ProjectOwnershipError([p.name for p in projects])

        if self.context.resource_upload_enabled and account.tenant_id is not None:
            tenant = await self.tenant_dao.get_by_pk(account.tenant_id)
            if tenant:
                await self.namespace_service.delete_user_home(tenant.code, account.id)

        await self.access_token_dao.delete_by_account(account_id)
        for grant_dao in self.grant_daos:
            await grant_dao.delete_by_account(account_id)
        await self.db.delete(account)
        await self.db.flush()
        logger.info(f"account {account_id} deleted by {actor.name}")

    # --- Internal ORM-returning "Workhorse" Methods ---

    async def _create_account(self, data: AccountCreate) -> Account:
        # --- 1. 验证 ---
        await self._ensure_name_available(data.name)
        tenant = await self._get_tenant(data.tenant_id)

        # --- 2. 对象构建 ---
        account_fields = data.model_dump(exclude={"password"})
        account = Account(
            **account_fields,
            password_hash=get_password_hash(data.password),
            account_type=AccountType.GENERAL,
        )
        await self._persist(account)

        # --- 3. 存储初始化 ---
        if self.context.resource_upload_enabled:
            await self.namespace_service.ensure_tenant_namespace(tenant.code)
            await self.namespace_service.ensure_user_home(tenant.code, account.id)

        logger.info(f"account '{account.name}' created in tenant '{tenant.code}'")
        return account

    async def _update_account(self, actor: Account, account_id: int, data: AccountUpdate) -> Account:
        account = await self._get_account(account_id)
        changes = data.model_dump(exclude_unset=True)

        # --- 1. 验证：全部校验通过之前不修改任何字段 ---
        new_name = changes.get("name")
        if new_name is not None and new_name != account.name:
            await self._ensure_name_available(new_name)

        new_state = changes.get("state")
        if (
            new_state == AccountState.PENDING
            and account.state != AccountState.PENDING
            and actor.id == account.id
        ):
            raise PermissionDeniedError("Not allowed to disable your own account.")

        plan: Optional[MigrationPlan] = None
        new_tenant_id = changes.pop("tenant_id", None)
        if new_tenant_id is not None and new_tenant_id != account.tenant_id:
            plan = await self.migration_service.plan_migration(account, new_tenant_id)

        # --- 2. 字段更新 ---
        password = changes.pop("password", None)
        if password:
            account.password_hash = get_password_hash(password)
        for field_name, value in changes.items():
            if value is None and field_name != "phone":
                continue
            setattr(account, field_name, value)

        # --- 3. 持久化；跨租户时由迁移服务负责存储与 flush ---
        if plan is not None:
            await self.migration_service.execute(plan)
        else:
            await self.db.flush()
        return account

    async def _activate(self, name: str) -> Account:
        account = await self.account_dao.get_by_name(name)
        if not account:
            raise AccountNotFoundError(name)
        if account.state != AccountState.PENDING:
            raise InvalidParameterError(f"Account '{name}' is already activated.")
        account.state = AccountState.ACTIVE
        await self.db.flush()
        logger.info(f"account '{name}' activated")
        return account

    async def _persist(self, account: Account) -> Account:
        try:
            return await self.account_dao.add(account)
        except IntegrityError as e:
            logger.error(f"integrity error while saving account '{account.name}': {e}")
            raise AccountNameExistsError(f"Account name '{account.name}' already exists.") from e

    async def _ensure_name_available(self, name: str) -> None:
        if await self.account_dao.get_by_name(name):
            raise AccountNameExistsError(f"Account name '{name}' already exists.")

    async def _get_account(self, account_id: int) -> Account:
        account = await self.account_dao.get_by_pk(account_id)
        if not account:
            raise AccountNotFoundError(account_id)
        return account

    async def _get_tenant(self, tenant_id: int) -> Tenant:
        tenant = await self.tenant_dao.get_by_pk(tenant_id)
        if not tenant:
            raise TenantNotFoundError(tenant_id)
        return tenant

    async def _to_read(self, account: Account) -> AccountRead:
        # updated_at 在 flush 后会过期，异步会话中必须显式刷新
        await self.db.refresh(account)
        return AccountRead.model_validate(account)
