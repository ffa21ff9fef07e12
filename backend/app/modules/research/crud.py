"""Чтение и запись записей любого вида поверх ResourceSpec."""
import logging
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.errors import DuplicateKeyError, ValidationError
from app.modules.research.enums import AuthorCapacity
from app.modules.research.model import utcnow
from app.modules.research.predicate import Predicate, compile_predicate
from app.modules.research.registry import ResourceSpec
from app.modules.research.validators import ValidatedWrite

logger = logging.getLogger(__name__)

SORT_ORDERS = ("asc", "desc")


def _dialect_name(session: AsyncSession) -> str:
    return session.get_bind().dialect.name


def _with_authors(spec: ResourceSpec, stmt):
    return stmt.options(
        selectinload(spec.model.authors).selectinload(spec.author_model.user)
    )


def resolve_sort(spec: ResourceSpec, sort_by: str, sort_order: str) -> list:
    """ORDER BY для sortBy (camelCase-имя скалярной колонки) и sortOrder; id как последний ключ."""
    fields = spec.sortable_fields()
    if sort_by not in fields:
        raise ValidationError(
            f"Invalid sortBy: {sort_by!r}. Allowed: {', '.join(sorted(fields))}"
        )
    if sort_order not in SORT_ORDERS:
        raise ValidationError(f"Invalid sortOrder: {sort_order!r}. Allowed: asc, desc")
    column = getattr(spec.model, fields[sort_by])
    id_column = spec.model.id
    if sort_order == "asc":
        return [column.asc(), id_column.asc()]
    return [column.desc(), id_column.desc()]


async def count_records(session: AsyncSession, spec: ResourceSpec, predicate: Predicate) -> int:
    condition = compile_predicate(predicate, spec, _dialect_name(session))
    total = await session.scalar(select(func.count()).select_from(spec.model).where(condition))
    return int(total or 0)


async def list_records(
    session: AsyncSession,
    spec: ResourceSpec,
    predicate: Predicate,
    page: int,
    limit: int,
    sort_by: str,
    sort_order: str,
) -> tuple[list[Any], int]:
    """
    Страница записей и полное число совпадений (без учёта пагинации).
    page с 1, skip = (page - 1) * limit.
    """
    order_by = resolve_sort(spec, sort_by, sort_order)
    condition = compile_predicate(predicate, spec, _dialect_name(session))
    total = await count_records(session, spec, predicate)
    stmt = (
        select(spec.model)
        .where(condition)
        .order_by(*order_by)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    result = await session.execute(_with_authors(spec, stmt))
    return list(result.scalars().all()), total


async def fetch_all(session: AsyncSession, spec: ResourceSpec, predicate: Predicate) -> list[Any]:
    """Все совпадения, новые первыми. Для выгрузки."""
    condition = compile_predicate(predicate, spec, _dialect_name(session))
    stmt = (
        select(spec.model)
        .where(condition)
        .order_by(spec.model.created_at.desc(), spec.model.id.desc())
    )
    result = await session.execute(_with_authors(spec, stmt))
    return list(result.scalars().all())


async def get_record(
    session: AsyncSession,
    spec: ResourceSpec,
    record_id: str,
    reload: bool = False,
) -> Any | None:
    """Запись с авторами и их пользователями. reload перечитывает уже загруженные объекты."""
    stmt = _with_authors(spec, select(spec.model).where(spec.model.id == record_id))
    if reload:
        stmt = stmt.execution_options(populate_existing=True)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def _flush(session: AsyncSession, spec: ResourceSpec) -> None:
    try:
        await session.flush()
    except IntegrityError as e:
        # гонка между проверкой уникальности и записью
        logger.warning("Integrity error on %s write: %s", spec.label, e.orig)
        raise DuplicateKeyError(f"{spec.label.capitalize()} violates a unique constraint")


def _author_rows(spec: ResourceSpec, capacity: AuthorCapacity, user_ids: list[str]) -> list[Any]:
    return [spec.author_model(user_id=user_id, capacity=capacity) for user_id in user_ids]


async def create_record(session: AsyncSession, spec: ResourceSpec, data: ValidatedWrite) -> Any:
    """Запись и строки авторства в одной транзакции."""
    record = spec.model(**data.values)
    record.authors = _author_rows(spec, AuthorCapacity.FACULTY, data.faculty_author_ids or []) + _author_rows(
        spec, AuthorCapacity.STUDENT, data.student_author_ids or []
    )
    session.add(record)
    await _flush(session, spec)
    return await get_record(session, spec, record.id, reload=True)


def _apply_author_diff(
    spec: ResourceSpec,
    record: Any,
    capacity: AuthorCapacity,
    user_ids: list[str],
) -> bool:
    """Добавить недостающих и удалить лишних авторов данной роли. True, если что-то изменилось."""
    wanted = list(dict.fromkeys(user_ids))
    current = {a.user_id: a for a in record.authors if a.capacity == capacity}
    removed = [a for user_id, a in current.items() if user_id not in wanted]
    added = [user_id for user_id in wanted if user_id not in current]
    for author in removed:
        record.authors.remove(author)
    record.authors.extend(_author_rows(spec, capacity, added))
    return bool(removed or added)


async def update_record(
    session: AsyncSession,
    spec: ResourceSpec,
    record: Any,
    data: ValidatedWrite,
) -> Any:
    """Записать только присланные поля; авторов применить разницей, без удаления всех."""
    changed = False
    for name, value in data.values.items():
        if getattr(record, name) != value:
            setattr(record, name, value)
            changed = True
    if data.faculty_author_ids is not None:
        changed |= _apply_author_diff(spec, record, AuthorCapacity.FACULTY, data.faculty_author_ids)
    if data.student_author_ids is not None:
        changed |= _apply_author_diff(spec, record, AuthorCapacity.STUDENT, data.student_author_ids)
    if changed:
        record.updated_at = utcnow()
    await _flush(session, spec)
    return await get_record(session, spec, record.id, reload=True)


async def delete_record(session: AsyncSession, spec: ResourceSpec, record: Any) -> None:
    await session.delete(record)
    await session.flush()


async def bulk_delete(session: AsyncSession, spec: ResourceSpec, ids: list[str]) -> int:
    """Удалить записи по списку id. Возвращает число удалённых записей по данным СУБД."""
    await session.execute(
        delete(spec.author_model).where(spec.author_model.record_id.in_(ids))
    )
    result = await session.execute(
        delete(spec.model).where(spec.model.id.in_(ids))
    )
    return int(result.rowcount or 0)
