# src/account_admin/dao/permission/grant_dao.py

from typing import List, Type
from sqlalchemy.ext.asyncio import AsyncSession
from account_admin.dao.base_dao import BaseDao, ModelType
from account_admin.models import ResourceGrant, ProjectGrant, DataSourceGrant, UdfGrant

class GrantDao(BaseDao[ModelType]):
    """
    授权关系表的通用 DAO。每张授权表都是 (account_id, <target>_id, perm)，
    子类只需声明目标列名。
    """
    target_column: str = ""

    def __init__(self, model_class: Type[ModelType], db_session: AsyncSession):
        super().__init__(model_class, db_session)
        if not self.target_column:
            raise ValueError(f"{self.__class__.__name__} must define 'target_column'.")

    async def list_target_ids(self, account_id: int) -> List[int]:
        return await self.pluck(self.target_column, where={"account_id": account_id})

    async def list_by_account(self, account_id: int) -> List[ModelType]:
        return await self.get_list(
            where={"account_id": account_id},
            order=[getattr(self.model, self.target_column).asc()]
        )

    async def delete_by_account(self, account_id: int) -> int:
        return await self.delete_where({"account_id": account_id})

    async def delete_relation(self, account_id: int, target_id: int) -> int:
        return await self.delete_where({"account_id": account_id, self.target_column: target_id})

    async def exists_relation(self, account_id: int, target_id: int) -> bool:
        return await self.count(where={"account_id": account_id, self.target_column: target_id}) > 0

class ResourceGrantDao(GrantDao[ResourceGrant]):
    target_column = "resource_id"

    def __init__(self, db_session: AsyncSession):
        super().__init__(ResourceGrant, db_session)

class ProjectGrantDao(GrantDao[ProjectGrant]):
    target_column = "project_id"

    def __init__(self, db_session: AsyncSession):
        super().__init__(ProjectGrant, db_session)

class DataSourceGrantDao(GrantDao[DataSourceGrant]):
    target_column = "data_source_id"

    def __init__(self, db_session: AsyncSession):
        super().__init__(DataSourceGrant, db_session)

class UdfGrantDao(GrantDao[UdfGrant]):
    target_column = "udf_id"

    def __init__(self, db_session: AsyncSession):
        super().__init__(UdfGrant, db_session)
