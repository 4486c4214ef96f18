# taghra_api/database.py
"""
Database engine and sessions
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from taghra_shared.config import config
from taghra_shared.models import Base

# Async engine
engine = create_async_engine(config.DATABASE_URL, echo=config.DB_ECHO)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency providing a database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(bind=None) -> None:
    """Create all tables that do not exist yet"""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = [
    'Base',
    'engine',
    'AsyncSessionLocal',
    'get_db',
    'create_tables',
]
