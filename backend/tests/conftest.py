"""
Общие фикстуры: отдельная sqlite-БД на тест, клиент httpx поверх ASGI-приложения,
пользователи и заголовки авторизации.
"""
import os
import tempfile

# До импорта app: session.py требует DATABASE_URL, логи не пишем в репозиторий
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="research-logs-"))

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.modules.auth.jwt import create_access_token
from app.modules.research.enums import UserRole
from app.modules.user.model import User
from app.modules.user.service import hash_password


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def client(session_factory):
    """Клиент к приложению; get_db отдаёт сессии тестовой БД."""

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """Создать пользователя в тестовой БД (id можно задать явно)."""

    async def _make_user(
        user_id: str,
        role: UserRole,
        name: str | None = None,
        email: str | None = None,
        password: str | None = None,
        is_active: bool = True,
    ) -> User:
        async with session_factory() as session:
            user = User(
                id=user_id,
                name=name or user_id,
                email=email or f"{user_id}@university.edu",
                role=role,
                hashed_password=hash_password(password) if password else None,
                is_active=is_active,
            )
            session.add(user)
            await session.commit()
            return user

    return _make_user


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.email, get_settings())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def people(make_user):
    """Базовый набор: админ, два преподавателя, три студента."""
    return {
        "admin": await make_user("a1", UserRole.ADMIN, name="Admin"),
        "f1": await make_user("f1", UserRole.FACULTY, name="Faculty One"),
        "f2": await make_user("f2", UserRole.FACULTY, name="Faculty Two"),
        "s1": await make_user("s1", UserRole.STUDENT, name="Student One"),
        "s2": await make_user("s2", UserRole.STUDENT, name="Student Two"),
        "s3": await make_user("s3", UserRole.STUDENT, name="Student Three"),
    }


@pytest.fixture
def headers():
    """headers(user) -> Authorization: Bearer для пользователя."""
    return auth_headers
