"""
Async engine и сессии БД. Одна сессия на запрос, коммит по успешному завершению.
"""
import logging
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings

logger = logging.getLogger(__name__)

# Синхронные драйверы -> async-драйверы SQLAlchemy
_ASYNC_DRIVERS = {
    "postgresql://": "postgresql+asyncpg://",
    "postgresql+psycopg://": "postgresql+asyncpg://",
    "postgresql+psycopg2://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


def to_async_url(url: str) -> str:
    """URL из .env (как для psql/alembic) в URL async-драйвера."""
    for prefix, async_prefix in _ASYNC_DRIVERS.items():
        if url.startswith(prefix):
            return async_prefix + url[len(prefix):]
    return url


_settings = get_settings()

if not _settings.DATABASE_URL:
    raise ValueError("DATABASE_URL is not set")

DATABASE_URL = to_async_url(_settings.DATABASE_URL)

engine = create_async_engine(
    DATABASE_URL,
    echo=_settings.SQL_ECHO,
    pool_pre_ping=DATABASE_URL.startswith("postgresql"),
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency FastAPI: сессия на время запроса.
    Любая ошибка в обработчике откатывает все изменения запроса.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.debug("Rolling back request session")
            await session.rollback()
            raise
