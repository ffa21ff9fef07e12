"""Общие схемы API публикаций: авторы, пагинация, удаление, статистика."""
from datetime import datetime
from typing import Any

from pydantic import Field

from app.core.schemas import CamelModel
from app.modules.research.enums import ResearchStatus, TeacherStatus
from app.modules.user.schemas import UserBrief


class AuthorOut(CamelModel):
    id: str
    user_id: str
    record_id: str
    user: UserBrief


class PublicationOut(CamelModel):
    """Поля, общие для всех видов записей в ответах."""

    id: str
    title: str
    abstract: str | None = None
    image_url: str | None = None
    document_url: str | None = None
    status: ResearchStatus
    teacher_status: TeacherStatus
    is_public: bool
    registration_fees: float | None = None
    reimbursement: float | None = None
    created_at: datetime
    updated_at: datetime
    faculty_authors: list[AuthorOut] = Field(default_factory=list)
    student_authors: list[AuthorOut] = Field(default_factory=list)


class PublicationWrite(CamelModel):
    """
    Тело POST/PATCH. Все поля опциональны на уровне схемы: обязательность и
    допустимые значения enum проверяют валидаторы ресурса, чтобы ответить
    понятной ошибкой с именем поля.
    """

    title: str | None = None
    abstract: str | None = None
    image_url: str | None = None
    document_url: str | None = None
    status: str | None = None
    teacher_status: str | None = None
    is_public: bool | None = None
    registration_fees: float | None = None
    reimbursement: float | None = None
    faculty_author_ids: list[str] | None = None
    student_author_ids: list[str] | None = None


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class BulkDeleteRequest(CamelModel):
    ids: list[str] | None = None


class MessageResponse(CamelModel):
    message: str


class BulkDeleteResponse(CamelModel):
    message: str
    count: int


def group_counts(key: str, rows: list[tuple[Any, int]]) -> list[dict[str, Any]]:
    """[(значение, count)] -> [{key: значение, "count": count}] (значения enum как строки)."""
    return [
        {key: getattr(value, "value", value), "count": int(count)}
        for value, count in rows
    ]
