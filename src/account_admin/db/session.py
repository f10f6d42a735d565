from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from account_admin.core.config import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,      # 每次从连接池获取连接时测试连通性，防止拿到失效连接
    pool_recycle=3600,       # 每隔1小时回收连接，防止因长时间空闲被服务器断开
)

SessionLocal = async_sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
    class_=AsyncSession
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a transactional scope around one administrative request.

    Grant reconciliation and tenant migration only flush; the commit happens
    here when the block exits cleanly and everything is rolled back otherwise.
    Remote storage side effects are not part of this transaction.
    """
    async with SessionLocal() as session:
        async with session.begin():
            yield session
