"""Роутеры пользователей: справочник авторов и управление special users (только ADMIN)."""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.errors import InvalidEnumError
from app.db.session import get_db
from app.modules.auth.caller import Caller
from app.modules.auth.router import get_current_caller, require_role
from app.modules.research.enums import UserRole
from app.modules.user import service
from app.modules.user.schemas import (
    DirectoryUser,
    MessageResponse,
    SpecialUserCreate,
    SpecialUserDelete,
    SpecialUserListResponse,
    SpecialUserOut,
    SpecialUserResponse,
    SpecialUserUpdate,
    UserDirectoryResponse,
)

router = APIRouter(prefix="/api/user", tags=["user"])
admin_router = APIRouter(prefix="/api/admin/special-users", tags=["admin"])

logger = logging.getLogger(__name__)

_DIRECTORY_ROLES = (UserRole.FACULTY, UserRole.STUDENT)


@router.get("", response_model=UserDirectoryResponse)
async def list_users(
    role: str | None = None,
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_caller),
) -> UserDirectoryResponse:
    """
    Справочник FACULTY/STUDENT для выбора авторов.
    role (регистр не важен) сужает выборку до одной роли.
    """
    role_filter: UserRole | None = None
    if role:
        try:
            role_filter = UserRole(role.strip().upper())
        except ValueError:
            role_filter = None
        if role_filter not in _DIRECTORY_ROLES:
            raise InvalidEnumError("role", role, [r.value for r in _DIRECTORY_ROLES])

    settings = get_settings()
    limit = min(limit or settings.USER_DIRECTORY_PAGE_SIZE, settings.RESEARCH_MAX_PAGE_SIZE)
    users, total = await service.list_directory(
        db, role_filter, (search or "").strip() or None, page, limit
    )
    return UserDirectoryResponse(
        data=[DirectoryUser.model_validate(u) for u in users],
        count=len(users),
        total=total,
        page=page,
        limit=limit,
        has_more=(page - 1) * limit + len(users) < total,
    )


@admin_router.get("", response_model=SpecialUserListResponse)
async def list_special_users(
    db: AsyncSession = Depends(get_db),
    admin: Caller = Depends(require_role(UserRole.ADMIN)),
) -> SpecialUserListResponse:
    items = await service.list_special_users(db)
    return SpecialUserListResponse(
        special_users=[SpecialUserOut.model_validate(s) for s in items]
    )


@admin_router.post("", response_model=SpecialUserResponse, status_code=status.HTTP_201_CREATED)
async def create_special_user(
    body: SpecialUserCreate,
    db: AsyncSession = Depends(get_db),
    admin: Caller = Depends(require_role(UserRole.ADMIN)),
) -> SpecialUserResponse:
    special = await service.create_special_user(db, body.email, body.role)
    logger.info("Special user %s created with role %s by %s", special.email, special.role.value, admin.id)
    return SpecialUserResponse(special_user=SpecialUserOut.model_validate(special))


@admin_router.patch("", response_model=SpecialUserResponse)
async def update_special_user(
    body: SpecialUserUpdate,
    db: AsyncSession = Depends(get_db),
    admin: Caller = Depends(require_role(UserRole.ADMIN)),
) -> SpecialUserResponse:
    special = await service.update_special_user(db, body.email, body.role)
    logger.info("Special user %s set to role %s by %s", special.email, special.role.value, admin.id)
    return SpecialUserResponse(special_user=SpecialUserOut.model_validate(special))


@admin_router.delete("", response_model=MessageResponse)
async def delete_special_user(
    body: SpecialUserDelete,
    db: AsyncSession = Depends(get_db),
    admin: Caller = Depends(require_role(UserRole.ADMIN)),
) -> MessageResponse:
    await service.delete_special_user(db, body.email)
    logger.info("Special user %s removed by %s", body.email, admin.id)
    return MessageResponse(message="Special user removed successfully")
