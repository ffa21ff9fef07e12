"""
Проверки тела POST/PATCH перед записью в БД.

Результат: значения колонок модели плюс списки id авторов. Все проверки
выполняются до первой записи.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import (
    DuplicateKeyError,
    InvalidAuthorReferenceError,
    MissingFieldError,
    ValidationError,
)
from app.modules.research.enums import UserRole
from app.modules.research.filters import parse_enum
from app.modules.research.registry import ResourceSpec
from app.modules.user.service import count_users_with_role

logger = logging.getLogger(__name__)

_AUTHOR_KEYS = ("faculty_author_ids", "student_author_ids")

# Поля, для которых явный null означает «оставить значение по умолчанию»
_NOT_NULL_WITH_DEFAULT = {"is_public": False, "keywords": []}


@dataclass
class ValidatedWrite:
    values: dict[str, Any]
    faculty_author_ids: list[str] | None
    student_author_ids: list[str] | None


def _normalize_value(name: str, value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"Invalid number for {to_camel(name)}")
    if isinstance(value, list) and name == "keywords":
        return [str(v).strip() for v in value if str(v).strip()]
    return value


def _check_required_strings(spec: ResourceSpec, values: dict[str, Any], partial: bool) -> None:
    for required in spec.required_fields:
        if partial and required.field not in values:
            continue
        value = values.get(required.field)
        if not isinstance(value, str) or not value.strip():
            raise MissingFieldError(to_camel(required.field), required.message)
        values[required.field] = value.strip()


def _check_enums(spec: ResourceSpec, values: dict[str, Any], partial: bool) -> None:
    for name, enum_cls in spec.enum_fields.items():
        param = to_camel(name)
        if name not in values or values[name] is None:
            if not partial and name in spec.required_enums:
                raise MissingFieldError(param)
            if name in values:
                if partial:
                    raise MissingFieldError(param, f"{param} cannot be empty")
                # на создании null = значение по умолчанию модели
                values.pop(name)
            continue
        values[name] = parse_enum(param, str(values[name]), enum_cls)


async def validate_author_ids(
    session: AsyncSession,
    user_ids: list[str],
    role: UserRole,
) -> None:
    """
    Все id должны существовать и принадлежать пользователям с ролью role.
    Сравнивается число найденных с числом запрошенных, так что дубликат тоже ошибка.
    """
    if not user_ids:
        return
    found = await count_users_with_role(session, user_ids, role)
    if found != len(user_ids):
        logger.warning(
            "Author reference check failed: %s of %s %s ids are valid",
            found,
            len(user_ids),
            role.value,
        )
        raise InvalidAuthorReferenceError(role.value.lower())


async def _check_authors(
    session: AsyncSession,
    spec: ResourceSpec,
    faculty_ids: list[str] | None,
    student_ids: list[str] | None,
    partial: bool,
) -> None:
    if spec.authors_required:
        if (not partial or faculty_ids is not None) and not faculty_ids:
            raise MissingFieldError("facultyAuthorIds", "At least one faculty author is required")
        if (not partial or student_ids is not None) and not student_ids:
            raise MissingFieldError("studentAuthorIds", "At least one student author is required")
    await validate_author_ids(session, faculty_ids or [], UserRole.FACULTY)
    await validate_author_ids(session, student_ids or [], UserRole.STUDENT)


async def _check_unique(
    session: AsyncSession,
    spec: ResourceSpec,
    values: dict[str, Any],
    exclude_id: str | None,
) -> None:
    for name, label in spec.unique_fields:
        if name not in values:
            continue
        column = getattr(spec.model, name)
        stmt = select(func.count()).select_from(spec.model).where(column == values[name])
        if exclude_id is not None:
            stmt = stmt.where(spec.model.id != exclude_id)
        if await session.scalar(stmt):
            raise DuplicateKeyError(f"{spec.label.capitalize()} with {label} {values[name]!r} already exists")


def _split(payload: BaseModel, partial: bool) -> tuple[dict[str, Any], list[str] | None, list[str] | None]:
    data = payload.model_dump(exclude_unset=partial)
    faculty_ids = data.pop("faculty_author_ids", None)
    student_ids = data.pop("student_author_ids", None)
    values = {name: _normalize_value(name, value) for name, value in data.items()}
    for name, default in _NOT_NULL_WITH_DEFAULT.items():
        if name in values and values[name] is None:
            if partial:
                values[name] = type(default)(default)
            else:
                values.pop(name)
    return values, faculty_ids, student_ids


async def validate_create(
    session: AsyncSession,
    spec: ResourceSpec,
    payload: BaseModel,
) -> ValidatedWrite:
    """Проверки создания: обязательные строки, enum, авторы, уникальность."""
    values, faculty_ids, student_ids = _split(payload, partial=False)
    _check_required_strings(spec, values, partial=False)
    _check_enums(spec, values, partial=False)
    await _check_authors(session, spec, faculty_ids, student_ids, partial=False)
    await _check_unique(session, spec, values, exclude_id=None)
    return ValidatedWrite(values, faculty_ids or [], student_ids or [])


async def validate_update(
    session: AsyncSession,
    spec: ResourceSpec,
    record: Any,
    payload: BaseModel,
) -> ValidatedWrite:
    """
    Проверки PATCH: только присланные поля. Обязательные строки нельзя
    обнулить; списки авторов, если присланы, проверяются как на создании.
    """
    values, faculty_ids, student_ids = _split(payload, partial=True)
    _check_required_strings(spec, values, partial=True)
    _check_enums(spec, values, partial=True)
    await _check_authors(session, spec, faculty_ids, student_ids, partial=True)
    changed_unique = {
        name: values[name]
        for name, _ in spec.unique_fields
        if name in values and values[name] != getattr(record, name)
    }
    await _check_unique(session, spec, changed_unique, exclude_id=record.id)
    return ValidatedWrite(values, faculty_ids, student_ids)
