# src/account_admin/dao/project/project_dao.py

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from account_admin.dao.base_dao import BaseDao
from account_admin.models import Project, DataSource, WorkflowDefinition, ReleaseState

class ProjectDao(BaseDao[Project]):
    def __init__(self, db_session: AsyncSession):
        super().__init__(Project, db_session)

    async def get_by_code(self, code: int) -> Optional[Project]:
        return await self.get_one(where={"code": code})

    async def list_created_by(self, owner_id: int) -> List[Project]:
        return await self.get_list(where={"owner_id": owner_id}, order=[Project.id.asc()])

class DataSourceDao(BaseDao[DataSource]):
    def __init__(self, db_session: AsyncSession):
        super().__init__(DataSource, db_session)

class WorkflowDefinitionDao(BaseDao[WorkflowDefinition]):
    def __init__(self, db_session: AsyncSession):
        super().__init__(WorkflowDefinition, db_session)

    async def list_released_with_resources(self, owner_id: int) -> List[WorkflowDefinition]:
        """获取某账户名下所有已上线、且引用了资源的工作流定义。"""
        return await self.get_list(
            where=[
                WorkflowDefinition.owner_id == owner_id,
                WorkflowDefinition.release_state == ReleaseState.ONLINE,
                WorkflowDefinition.resource_ids.is_not(None),
                WorkflowDefinition.resource_ids != "",
            ],
            order=[WorkflowDefinition.id.asc()]
        )
