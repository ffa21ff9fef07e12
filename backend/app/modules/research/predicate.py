"""
Типизированное дерево условий отбора записей и два его «исполнителя»:
компиляция в SQLAlchemy-выражение и вычисление над загруженной записью в памяти.

Поля адресуются именами атрибутов модели (snake_case).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import TYPE_CHECKING, Any, Union

from sqlalchemy import and_ as sa_and, cast, false, func, literal, or_ as sa_or, select, true
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql.elements import ColumnElement

from app.modules.research.enums import AuthorCapacity

if TYPE_CHECKING:
    from app.modules.research.registry import ResourceSpec


@dataclass(frozen=True)
class TrueP:
    """Без ограничений."""


@dataclass(frozen=True)
class And:
    items: tuple["Predicate", ...]


@dataclass(frozen=True)
class Or:
    """Пустой Or не совпадает ни с чем."""

    items: tuple["Predicate", ...]


@dataclass(frozen=True)
class Eq:
    field: str
    value: Any


@dataclass(frozen=True)
class Contains:
    """Подстрока без учёта регистра."""

    field: str
    text: str


@dataclass(frozen=True)
class Range:
    """Включительный диапазон; любая из границ может отсутствовать. NULL в поле не совпадает."""

    field: str
    lower: Any = None
    upper: Any = None


@dataclass(frozen=True)
class HasElement:
    """Поле-список содержит элемент."""

    field: str
    value: Any


@dataclass(frozen=True)
class AuthoredBy:
    """У записи есть автор с данной ролью и user_id из набора."""

    capacity: AuthorCapacity
    user_ids: tuple[str, ...]


Predicate = Union[TrueP, And, Or, Eq, Contains, Range, HasElement, AuthoredBy]

TRUE = TrueP()


def and_(*items: Predicate) -> Predicate:
    """Конъюнкция: вложенные And разворачиваются, TrueP отбрасываются."""
    flat: list[Predicate] = []
    for item in items:
        if isinstance(item, TrueP):
            continue
        if isinstance(item, And):
            flat.extend(item.items)
        else:
            flat.append(item)
    if not flat:
        return TRUE
    if len(flat) == 1:
        return flat[0]
    return And(tuple(flat))


def or_(*items: Predicate) -> Predicate:
    """Дизъюнкция: вложенные Or разворачиваются, TrueP поглощает всё выражение."""
    flat: list[Predicate] = []
    for item in items:
        if isinstance(item, TrueP):
            return TRUE
        if isinstance(item, Or):
            flat.extend(item.items)
        else:
            flat.append(item)
    if len(flat) == 1:
        return flat[0]
    return Or(tuple(flat))


# --- SQL ---


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _column(spec: "ResourceSpec", field: str):
    column = getattr(spec.model, field, None)
    if column is None:
        raise ValueError(f"{spec.model.__name__} has no field {field!r}")
    return column


def _has_element_sql(column, value: Any, dialect_name: str) -> ColumnElement[bool]:
    if dialect_name == "postgresql":
        return cast(column, JSONB).contains([value])
    each = func.json_each(column).table_valued("value")
    return select(literal(1)).select_from(each).where(each.c.value == value).exists()


def compile_predicate(pred: Predicate, spec: "ResourceSpec", dialect_name: str) -> ColumnElement[bool]:
    """
    Собрать SQLAlchemy-условие для модели spec.model.

    dialect_name нужен для HasElement: в Postgres это JSONB @>, в остальных СУБД
    EXISTS по json_each.
    """
    if isinstance(pred, TrueP):
        return true()
    if isinstance(pred, And):
        return sa_and(*(compile_predicate(p, spec, dialect_name) for p in pred.items))
    if isinstance(pred, Or):
        if not pred.items:
            return false()
        return sa_or(*(compile_predicate(p, spec, dialect_name) for p in pred.items))
    if isinstance(pred, Eq):
        return _column(spec, pred.field) == pred.value
    if isinstance(pred, Contains):
        return _column(spec, pred.field).ilike(f"%{escape_like(pred.text)}%", escape="\\")
    if isinstance(pred, Range):
        column = _column(spec, pred.field)
        bounds = []
        if pred.lower is not None:
            bounds.append(column >= pred.lower)
        if pred.upper is not None:
            bounds.append(column <= pred.upper)
        if not bounds:
            return column.is_not(None)
        return sa_and(*bounds)
    if isinstance(pred, HasElement):
        return _has_element_sql(_column(spec, pred.field), pred.value, dialect_name)
    if isinstance(pred, AuthoredBy):
        author = spec.author_model
        return spec.model.authors.any(
            sa_and(
                author.user_id.in_(list(pred.user_ids)),
                author.capacity == pred.capacity,
            )
        )
    raise TypeError(f"Unsupported predicate node: {type(pred).__name__}")


# --- in-memory ---


def _comparable(value: Any) -> Any:
    """
    Привести даты к сравнимому виду: sqlite отдаёт naive datetime,
    фильтры строятся в UTC-aware.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


def evaluate(pred: Predicate, record: Any) -> bool:
    """Вычислить условие над загруженной записью (authors должны быть загружены)."""
    if isinstance(pred, TrueP):
        return True
    if isinstance(pred, And):
        return all(evaluate(p, record) for p in pred.items)
    if isinstance(pred, Or):
        return any(evaluate(p, record) for p in pred.items)
    if isinstance(pred, Eq):
        return getattr(record, pred.field) == pred.value
    if isinstance(pred, Contains):
        value = getattr(record, pred.field)
        return value is not None and pred.text.lower() in str(value).lower()
    if isinstance(pred, Range):
        value = getattr(record, pred.field)
        if value is None:
            return False
        value = _comparable(value)
        if pred.lower is not None and value < _comparable(pred.lower):
            return False
        if pred.upper is not None and value > _comparable(pred.upper):
            return False
        return True
    if isinstance(pred, HasElement):
        return pred.value in (getattr(record, pred.field) or [])
    if isinstance(pred, AuthoredBy):
        ids = set(pred.user_ids)
        return any(
            a.user_id in ids and a.capacity == pred.capacity
            for a in record.authors
        )
    raise TypeError(f"Unsupported predicate node: {type(pred).__name__}")
