"""Общие колонки публикаций и строк авторства (журнал, глава книги, авторское право)."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship
from sqlalchemy.types import Enum as SAEnum

from app.db.base import new_id
from app.modules.research.enums import AuthorCapacity, ResearchStatus, TeacherStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PublicationMixin:
    """Поля, общие для всех видов записей. Подкласс объявляет relationship authors."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id,
    )
    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    abstract: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    image_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Ссылка на изображение во внешнем хранилище",
    )
    document_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Ссылка на документ во внешнем хранилище",
    )
    status: Mapped[ResearchStatus] = mapped_column(
        SAEnum(ResearchStatus, name="research_status"),
        default=ResearchStatus.SUBMITTED,
        nullable=False,
        index=True,
    )
    teacher_status: Mapped[TeacherStatus] = mapped_column(
        SAEnum(TeacherStatus, name="teacher_status"),
        default=TeacherStatus.UPLOADED,
        nullable=False,
        index=True,
    )
    is_public: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        index=True,
    )
    registration_fees: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
    )
    reimbursement: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    @property
    def faculty_authors(self) -> list:
        return [a for a in self.authors if a.capacity == AuthorCapacity.FACULTY]

    @property
    def student_authors(self) -> list:
        return [a for a in self.authors if a.capacity == AuthorCapacity.STUDENT]


class AuthorshipMixin:
    """Строка авторства: пользователь в роли FACULTY или STUDENT. Подкласс объявляет record_id."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=new_id,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    capacity: Mapped[AuthorCapacity] = mapped_column(
        SAEnum(AuthorCapacity, name="author_capacity"),
        nullable=False,
    )

    @declared_attr
    def user(cls):
        return relationship("User", lazy="selectin")
