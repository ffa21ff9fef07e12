"""Окружение Alembic: async engine из app.db.session, метаданные всех моделей."""
import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.ext.asyncio import AsyncEngine

from app.db.base import Base
from app.db.session import engine, DATABASE_URL

# Импорт моделей регистрирует таблицы в Base.metadata
from app.modules.user.model import User, SpecialUser  # noqa: F401
from app.modules.journal.model import Journal, JournalAuthor  # noqa: F401
from app.modules.book_chapter.model import BookChapter, BookChapterAuthor  # noqa: F401
from app.modules.copyright.model import Copyright, CopyrightAuthor  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Генерация SQL без подключения к БД (alembic upgrade --sql)."""
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online(connectable: AsyncEngine) -> None:
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online(engine))
