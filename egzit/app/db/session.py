"""
Database engine and sessions.

One async engine per process. Move transitions flush inside a request-scoped
session and commit once at the endpoint, so every request gets its own
session with expire_on_commit off (responses read attributes after commit).
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from egzit.app.core.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=settings.db_echo,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Declarative base for every egzit model
Base = declarative_base()


async def get_db():
    """FastAPI dependency: one session per request, closed when the request ends."""
    async with AsyncSessionLocal() as session:
        yield session
