import operator
from typing import Type, TypeVar, Generic, Any, Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import inspect, and_, func, select, delete
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.selectable import Select
from account_admin.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)

# where 列表中三元组条件支持的运算符
_OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}

class BaseDao(Generic[ModelType]):
    def __init__(self, model_class: Type[ModelType], db_session: AsyncSession):
        self.model: Type[ModelType] = model_class
        self.db_session: AsyncSession = db_session
        primary_keys = inspect(model_class).primary_key
        if not primary_keys:
            raise ValueError(f"Model {model_class.__name__} does not have a primary key.")
        self.pk: str = primary_keys[0].name

    # ==============================================================================
    # 1. 实体/对象方法 (Object Methods)
    #    - 输入和输出都是 ORM 对象实例
    # ==============================================================================

    async def get_list(
        self,
        where: Optional[dict | list] = None,
        withs: Optional[list] = None,
        order: Optional[list] = None,
        page: int = 0,
        limit: int = 0,
    ) -> list[ModelType]:
        stmt = self._quick_query(where=where, withs=withs, order=order, page=page, limit=limit)
        executed = await self.db_session.execute(stmt)
        return list(executed.scalars().all())

    async def get_one(
        self,
        where: Optional[dict | list] = None,
        withs: Optional[list] = None,
        order: Optional[list] = None
    ) -> Optional[ModelType]:
        stmt = self._quick_query(where=where, withs=withs, order=order)
        executed = await self.db_session.execute(stmt)
        return executed.scalars().first()

    async def get_by_pk(self, pk_value: Any, withs: Optional[list] = None) -> Optional[ModelType]:
        return await self.get_one(where={self.pk: pk_value}, withs=withs)

    async def get_by_pks(self, pk_values: list) -> list[ModelType]:
        if not pk_values:
            return []
        return await self.get_list(where=[(self.pk, "in", list(pk_values))])

    async def count(self, where: Optional[dict | list] = None) -> int:
        subquery_stmt = self._quick_query(where=where).subquery()
        count_stmt = select(func.count()).select_from(subquery_stmt)
        executed = await self.db_session.execute(count_stmt)
        return executed.scalar() or 0

    async def add(self, instance: ModelType, auto_flush: bool = True) -> ModelType:
        self.db_session.add(instance)
        if auto_flush:
            await self.db_session.flush()
            await self.db_session.refresh(instance)
        return instance

    async def add_all(self, instances: list[ModelType], auto_flush: bool = True) -> list[ModelType]:
        if not instances:
            return []
        self.db_session.add_all(instances)
        if auto_flush:
            await self.db_session.flush()
        return instances

    # ==============================================================================
    # 2. 数据/批量方法 (Data/Bulk Methods)
    # ==============================================================================

    async def delete_where(self, where: dict | list) -> int:
        if not where:
            return 0
        conditions = self._where_format(where)
        stmt = delete(self.model).where(*conditions)
        executed = await self.db_session.execute(stmt)
        return executed.rowcount

    async def pluck(self, column_name: str, where: Optional[dict | list] = None, order: Optional[list] = None) -> list[Any]:
        stmt = select(getattr(self.model, column_name))
        stmt = self._quick_query(stmt=stmt, where=where, order=order)
        executed = await self.db_session.execute(stmt)
        return list(executed.scalars().all())

    # ==============================================================================
    # 3. 查询构建辅助方法 (Query Building Helpers)
    # ==============================================================================

    def _quick_query(
        self,
        stmt: Optional[Select] = None,
        where: Optional[dict | list] = None,
        withs: Optional[list] = None,
        order: Optional[list] = None,
        page: int = 0,
        limit: int = 0,
    ) -> Select:
        if stmt is None:
            stmt = select(self.model)

        if where is not None:
            stmt = stmt.filter(*self._where_format(where))

        if withs:
            stmt = stmt.options(*[selectinload(getattr(self.model, name)) for name in withs])

        if order is not None:
            stmt = stmt.order_by(*order)

        if page > 0 and limit > 0:
            stmt = stmt.limit(limit).offset((page - 1) * limit)

        return stmt

    def _where_format(self, conditions: list | dict) -> list:
        """
        支持三种写法:
          - dict: {"owner_id": 1, "type": ResourceType.FILE}
          - 三元组: ("id", "in", [1, 2]) / ("size", ">", 0)
          - 原生 SQLAlchemy 表达式
        """
        if not conditions:
            return []

        processed_conditions = []
        if isinstance(conditions, dict):
            processed_conditions = [getattr(self.model, field) == value for field, value in conditions.items()]
        else:
            for condition in conditions:
                if isinstance(condition, (list, tuple)):
                    field, op, value = condition
                    column = getattr(self.model, field)
                    if op == "in":
                        processed_conditions.append(column.in_(value))
                    elif op in _OPERATORS:
                        processed_conditions.append(_OPERATORS[op](column, value))
                    else:
                        raise ValueError(f"Unsupported operator '{op}' in where condition.")
                else:
                    processed_conditions.append(condition)
        if len(processed_conditions) > 1:
            processed_conditions = [and_(*processed_conditions)]
        return processed_conditions
