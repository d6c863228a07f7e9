from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from .config import settings

# One engine per process; the URL picks the driver (aiosqlite or asyncpg)
engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
)

# Sessions keep loaded rows usable after commit so services can return them
async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; routers pass it on to the services."""
    async with async_session() as session:
        yield session
