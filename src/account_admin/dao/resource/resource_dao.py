# src/account_admin/dao/resource/resource_dao.py

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from account_admin.dao.base_dao import BaseDao
from account_admin.models import Resource, ResourceType, UdfFunction

class ResourceDao(BaseDao[Resource]):
    def __init__(self, db_session: AsyncSession):
        super().__init__(Resource, db_session)

    async def list_by_owner(self, owner_id: int, resource_type: ResourceType) -> List[Resource]:
        """
        列出某账户在某一类别下的全部资源（扁平列表）。
        按 id 排序，保证构建出的森林中兄弟节点顺序稳定。
        """
        return await self.get_list(
            where={"owner_id": owner_id, "type": resource_type},
            order=[Resource.id.asc()]
        )

class UdfFunctionDao(BaseDao[UdfFunction]):
    def __init__(self, db_session: AsyncSession):
        super().__init__(UdfFunction, db_session)
