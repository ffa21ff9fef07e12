import logging

import jwt
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.errors import ForbiddenError, NotFoundError, UnauthorizedError
from app.db.session import get_db
from app.modules.auth.caller import Caller
from app.modules.auth.jwt import create_access_token, decode_access_token
from app.modules.auth.schemas import LoginRequest, LoginResponse, MeResponse
from app.modules.research.enums import UserRole
from app.modules.user.model import User
from app.modules.user.service import (
    get_by_email,
    get_by_id,
    resolve_login_role,
    verify_password,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])

logger = logging.getLogger(__name__)


def _bearer_token(request: Request) -> str | None:
    """Токен из Authorization: Bearer <token>; None, если заголовка нет."""
    auth = request.headers.get("Authorization")
    if auth is None:
        return None
    if not auth.startswith("Bearer ") or not auth[7:].strip():
        raise UnauthorizedError("Not authenticated")
    return auth[7:].strip()


async def _user_from_token(token: str, db: AsyncSession) -> User:
    try:
        user_id = decode_access_token(token, get_settings())
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid or expired token")
    user = await get_by_id(db, user_id)
    if user is None:
        # Сессия валидна, но пользователя уже нет: это не 401
        raise NotFoundError("User not found")
    if not user.is_active:
        raise UnauthorizedError("User is inactive")
    return user


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Извлечь текущего пользователя из Authorization: Bearer <token>. 401 при отсутствии или невалидном токене."""
    token = _bearer_token(request)
    if token is None:
        raise UnauthorizedError("Not authenticated")
    return await _user_from_token(token, db)


async def get_current_caller(
    user: User = Depends(get_current_user),
) -> Caller:
    return Caller(id=user.id, role=user.role)


async def get_optional_caller(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Caller | None:
    """
    Вызывающий или None для анонимного запроса.
    Присланный, но невалидный токен не понижается до анонима: 401.
    """
    token = _bearer_token(request)
    if token is None:
        return None
    user = await _user_from_token(token, db)
    return Caller(id=user.id, role=user.role)


def require_role(*roles: UserRole):
    """Dependency: вызывающий с одной из ролей, иначе 403."""

    async def _dependency(caller: Caller = Depends(get_current_caller)) -> Caller:
        if caller.role not in roles:
            raise ForbiddenError(
                f"Forbidden - {' or '.join(r.value for r in roles)} access required"
            )
        return caller

    return _dependency


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Вход по email и паролю.
    Возвращает access_token (JWT), email и эффективную роль.
    """
    user = await get_by_email(db, request.email)
    if not user or not user.hashed_password:
        logger.warning("Login attempt for unknown email: %s", request.email)
        raise UnauthorizedError("Invalid email or password")
    if not user.is_active:
        raise ForbiddenError("Account is disabled")
    if not verify_password(request.password, user.hashed_password):
        logger.warning("Login failed: invalid password for %s", request.email)
        raise UnauthorizedError("Invalid email or password")

    role = await resolve_login_role(db, user)
    token = create_access_token(user.id, user.email, get_settings())
    logger.info("User logged in: %s (user_id: %s, role: %s)", user.email, user.id, role.value)
    return LoginResponse(
        access_token=token,
        token_type="bearer",
        email=user.email,
        role=role,
    )


@router.get("/me", response_model=MeResponse)
async def me(
    current_user: User = Depends(get_current_user),
) -> MeResponse:
    """Текущий пользователь по JWT."""
    return MeResponse(
        id=current_user.id,
        email=current_user.email,
        name=current_user.name,
        role=current_user.role,
    )
