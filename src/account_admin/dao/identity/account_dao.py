# account_admin/dao/identity/account_dao.py
from sqlalchemy.ext.asyncio import AsyncSession

from typing import Optional
from account_admin.dao.base_dao import BaseDao
from account_admin.models import Account, AccessToken, AccountType

class AccountDao(BaseDao[Account]):
    def __init__(self, db_session: AsyncSession):
        super().__init__(Account, db_session)

    async def get_by_name(self, name: str) -> Optional[Account]:
        """Finds an account by its exact (case-sensitive) name."""
        return await self.get_one(where={"name": name})

    async def list_general_accounts(self) -> list[Account]:
        return await self.get_list(where={"account_type": AccountType.GENERAL}, order=[Account.id.asc()])

    def _name_filter(self, search_val: Optional[str]) -> Optional[list]:
        return [Account.name.like(f"%{search_val}%")] if search_val else None

    async def search_by_name(self, search_val: Optional[str], page: int, limit: int) -> list[Account]:
        return await self.get_list(
            where=self._name_filter(search_val), order=[Account.id.asc()], page=page, limit=limit
        )

    async def count_by_name(self, search_val: Optional[str]) -> int:
        return await self.count(where=self._name_filter(search_val))

class AccessTokenDao(BaseDao[AccessToken]):
    def __init__(self, db_session: AsyncSession):
        super().__init__(AccessToken, db_session)

    async def delete_by_account(self, account_id: int) -> int:
        return await self.delete_where({"account_id": account_id})
