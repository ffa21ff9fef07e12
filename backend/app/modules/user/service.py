import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from passlib.context import CryptContext

from app.core.errors import DuplicateKeyError, NotFoundError
from app.modules.research.enums import UserRole
from app.modules.research.predicate import escape_like
from app.modules.user.model import SpecialUser, User

logger = logging.getLogger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


async def get_by_id(session: AsyncSession, user_id: str) -> User | None:
    """Получить пользователя по id."""
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_by_email(session: AsyncSession, email: str) -> User | None:
    """Получить пользователя по email (без учёта регистра)."""
    result = await session.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    )
    return result.scalar_one_or_none()


def hash_password(password: str) -> str:
    """Хешировать пароль с помощью passlib/bcrypt."""
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """
    Проверить пароль против хеша.

    Args:
        password: Пароль в открытом виде
        hashed: Хешированный пароль из БД

    Returns:
        True если пароль совпадает, False иначе.
    """
    return pwd_context.verify(password, hashed)


async def resolve_login_role(session: AsyncSession, user: User) -> UserRole:
    """
    Эффективная роль при входе: роль из special_users для e-mail пользователя,
    иначе STUDENT. Если сохранённая роль отличается, обновляем её.
    """
    special = await get_special_user_by_email(session, user.email)
    role = special.role if special else UserRole.STUDENT
    if user.role != role:
        logger.info("Role of user %s changed on login: %s -> %s", user.id, user.role.value, role.value)
        user.role = role
        await session.flush()
    return role


async def list_directory(
    session: AsyncSession,
    role: UserRole | None,
    search: str | None,
    page: int,
    limit: int,
) -> tuple[list[User], int]:
    """
    Справочник пользователей для выбора авторов: только FACULTY и STUDENT,
    по алфавиту имени. search ищет подстроку в имени или e-mail.
    """
    conditions = [User.role.in_([UserRole.FACULTY, UserRole.STUDENT])]
    if role is not None:
        conditions.append(User.role == role)
    if search:
        pattern = f"%{escape_like(search)}%"
        conditions.append(
            or_(User.name.ilike(pattern, escape="\\"), User.email.ilike(pattern, escape="\\"))
        )

    total = await session.scalar(select(func.count()).select_from(User).where(*conditions))
    result = await session.execute(
        select(User)
        .where(*conditions)
        .order_by(User.name.asc(), User.id.asc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all()), int(total or 0)


async def count_users_with_role(
    session: AsyncSession,
    user_ids: list[str],
    role: UserRole,
) -> int:
    """Сколько из переданных id принадлежат пользователям с указанной ролью."""
    if not user_ids:
        return 0
    total = await session.scalar(
        select(func.count())
        .select_from(User)
        .where(User.id.in_(user_ids), User.role == role)
    )
    return int(total or 0)


# --- special users ---


async def get_special_user_by_email(session: AsyncSession, email: str) -> SpecialUser | None:
    result = await session.execute(
        select(SpecialUser).where(SpecialUser.email == email.strip().lower())
    )
    return result.scalar_one_or_none()


async def list_special_users(session: AsyncSession) -> list[SpecialUser]:
    result = await session.execute(
        select(SpecialUser).order_by(SpecialUser.created_at.desc(), SpecialUser.id)
    )
    return list(result.scalars().all())


async def create_special_user(session: AsyncSession, email: str, role: UserRole) -> SpecialUser:
    """Назначить роль e-mail'у. Повторное назначение того же e-mail даёт DuplicateKeyError."""
    normalized = email.strip().lower()
    if await get_special_user_by_email(session, normalized):
        raise DuplicateKeyError(f"Special user with email {normalized} already exists")
    special = SpecialUser(email=normalized, role=role)
    session.add(special)
    await session.flush()
    return special


async def update_special_user(session: AsyncSession, email: str, role: UserRole) -> SpecialUser:
    special = await get_special_user_by_email(session, email)
    if special is None:
        raise NotFoundError("Special user not found")
    special.role = role
    await session.flush()
    return special


async def delete_special_user(session: AsyncSession, email: str) -> None:
    special = await get_special_user_by_email(session, email)
    if special is None:
        raise NotFoundError("Special user not found")
    await session.delete(special)
    await session.flush()
