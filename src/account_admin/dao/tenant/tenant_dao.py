from sqlalchemy.ext.asyncio import AsyncSession

from account_admin.dao.base_dao import BaseDao
from account_admin.models import Tenant

class TenantDao(BaseDao[Tenant]):
    def __init__(self, db_session: AsyncSession):
        super().__init__(Tenant, db_session)
