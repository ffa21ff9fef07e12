"""Схемы API пользователей: справочник авторов и special users."""
from datetime import datetime

from pydantic import EmailStr, Field

from app.core.schemas import CamelModel
from app.modules.research.enums import UserRole


class UserBrief(CamelModel):
    """Пользователь в списках и во вложенных авторах записей."""

    id: str
    name: str | None = None
    email: str | None = None
    image: str | None = None


class DirectoryUser(UserBrief):
    role: UserRole


class UserDirectoryResponse(CamelModel):
    data: list[DirectoryUser]
    count: int
    total: int
    page: int
    limit: int
    has_more: bool


class SpecialUserOut(CamelModel):
    id: str
    email: str
    role: UserRole
    created_at: datetime


class SpecialUserCreate(CamelModel):
    email: EmailStr
    role: UserRole = Field(..., description="STUDENT, FACULTY или ADMIN")


class SpecialUserUpdate(SpecialUserCreate):
    pass


class SpecialUserDelete(CamelModel):
    email: EmailStr


class SpecialUserListResponse(CamelModel):
    special_users: list[SpecialUserOut]


class SpecialUserResponse(CamelModel):
    special_user: SpecialUserOut


class MessageResponse(CamelModel):
    message: str
