from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, new_id
from app.modules.research.enums import UserRole


UserRoleType = SAEnum(UserRole, name="user_role")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id,
    )
    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    image: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
    )
    role: Mapped[UserRole] = mapped_column(
        UserRoleType,
        default=UserRole.STUDENT,
        nullable=False,
        index=True,
    )
    hashed_password: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )


class SpecialUser(Base):
    """Заранее назначенная роль по e-mail: применяется при входе пользователя."""

    __tablename__ = "special_users"
    __table_args__ = (
        {"comment": "Назначение ролей по e-mail (ADMIN/FACULTY/STUDENT)"},
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id,
        comment="Уникальный идентификатор записи",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="E-mail пользователя (в нижнем регистре)",
    )
    role: Mapped[UserRole] = mapped_column(
        UserRoleType,
        nullable=False,
        comment="Роль, которая будет выдана при входе",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False,
        comment="Дата и время создания",
    )
