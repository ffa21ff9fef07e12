"""
Разбор query-параметров фильтров и сборка итогового предиката.

Пустая строка и отсутствующий параметр означают «не задано». Мусор в enum-,
числовых, булевых и датовых параметрах отклоняется с ValidationError (400).
"""
import enum
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import TYPE_CHECKING, Any, Mapping

from app.core.errors import InvalidEnumError, ValidationError
from app.modules.research.enums import AuthorCapacity, enum_values
from app.modules.research.predicate import (
    AuthoredBy,
    Contains,
    Eq,
    HasElement,
    Predicate,
    Range,
    and_,
    or_,
)

if TYPE_CHECKING:
    from app.modules.research.registry import ResourceSpec

logger = logging.getLogger(__name__)


class FilterKind(str, enum.Enum):
    ENUM = "ENUM"
    BOOL = "BOOL"
    CONTAINS = "CONTAINS"
    HAS_ELEMENT = "HAS_ELEMENT"
    DATE_RANGE = "DATE_RANGE"  # <param>From / <param>To
    NUMBER_RANGE = "NUMBER_RANGE"  # min<Param> / max<Param>
    AUTHORS = "AUTHORS"


@dataclass(frozen=True)
class FilterField:
    """
    Один фильтр ресурса.

    param: имя query-параметра (для диапазонов: основа имени).
    column: атрибут модели. Для AUTHORS не используется, вместо него capacity.
    """

    param: str
    kind: FilterKind
    column: str = ""
    enum_cls: type[enum.Enum] | None = None
    capacity: AuthorCapacity | None = None

    def query_names(self) -> tuple[str, ...]:
        if self.kind == FilterKind.DATE_RANGE:
            return (f"{self.param}From", f"{self.param}To")
        if self.kind == FilterKind.NUMBER_RANGE:
            suffix = self.param[:1].upper() + self.param[1:]
            return (f"min{suffix}", f"max{suffix}")
        return (self.param,)


@dataclass
class FilterParams:
    """Разобранные фильтры: param -> значение (enum, bool, str, (lo, hi), tuple id)."""

    values: dict[str, Any] = field(default_factory=dict)
    search: str | None = None


def _get(params: Mapping[str, Any], name: str) -> str | None:
    raw = params.get(name)
    if raw is None:
        return None
    raw = str(raw).strip()
    return raw or None


def _get_list(params: Mapping[str, Any], name: str) -> list[str]:
    """Список id: повторяющийся параметр и/или значения через запятую."""
    if hasattr(params, "getlist"):
        raw_values = params.getlist(name)
    else:
        raw = params.get(name)
        raw_values = raw if isinstance(raw, (list, tuple)) else ([raw] if raw is not None else [])
    ids: list[str] = []
    for raw in raw_values:
        for part in str(raw).split(","):
            part = part.strip()
            if part and part not in ids:
                ids.append(part)
    return ids


def parse_enum(name: str, raw: str, enum_cls: type[enum.Enum]) -> enum.Enum:
    try:
        return enum_cls(raw)
    except ValueError:
        raise InvalidEnumError(name, raw, enum_values(enum_cls))


def parse_bool(name: str, raw: str) -> bool:
    lowered = raw.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValidationError(f"Invalid value for {name}: {raw!r}. Expected true or false")


def parse_number(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError(f"Invalid number for {name}: {raw!r}")
    if not math.isfinite(value):
        raise ValidationError(f"Invalid number for {name}: {raw!r}")
    return value


def parse_datetime(name: str, raw: str, end_of_day: bool = False) -> datetime:
    """
    ISO-дата или дата-время, результат в UTC.
    Дата без времени: начало дня, для верхней границы конец дня.
    """
    try:
        if len(raw) == 10:
            day = date.fromisoformat(raw)
            return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=timezone.utc)
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid date for {name}: {raw!r}")
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_filters(spec: "ResourceSpec", params: Mapping[str, Any]) -> FilterParams:
    """Разобрать фильтры ресурса из query-параметров."""
    parsed = FilterParams(search=_get(params, "search"))
    for flt in spec.filters:
        if flt.kind == FilterKind.ENUM:
            raw = _get(params, flt.param)
            if raw is not None:
                parsed.values[flt.param] = parse_enum(flt.param, raw, flt.enum_cls)
        elif flt.kind == FilterKind.BOOL:
            raw = _get(params, flt.param)
            if raw is not None:
                parsed.values[flt.param] = parse_bool(flt.param, raw)
        elif flt.kind in (FilterKind.CONTAINS, FilterKind.HAS_ELEMENT):
            raw = _get(params, flt.param)
            if raw is not None:
                parsed.values[flt.param] = raw
        elif flt.kind == FilterKind.DATE_RANGE:
            lo_name, hi_name = flt.query_names()
            lo_raw, hi_raw = _get(params, lo_name), _get(params, hi_name)
            if lo_raw is not None or hi_raw is not None:
                parsed.values[flt.param] = (
                    parse_datetime(lo_name, lo_raw) if lo_raw is not None else None,
                    parse_datetime(hi_name, hi_raw, end_of_day=True) if hi_raw is not None else None,
                )
        elif flt.kind == FilterKind.NUMBER_RANGE:
            lo_name, hi_name = flt.query_names()
            lo_raw, hi_raw = _get(params, lo_name), _get(params, hi_name)
            if lo_raw is not None or hi_raw is not None:
                parsed.values[flt.param] = (
                    parse_number(lo_name, lo_raw) if lo_raw is not None else None,
                    parse_number(hi_name, hi_raw) if hi_raw is not None else None,
                )
        elif flt.kind == FilterKind.AUTHORS:
            ids = _get_list(params, flt.param)
            if ids:
                parsed.values[flt.param] = tuple(ids)
    return parsed


def _filter_predicate(flt: FilterField, value: Any) -> Predicate:
    if flt.kind in (FilterKind.ENUM, FilterKind.BOOL):
        return Eq(flt.column, value)
    if flt.kind == FilterKind.CONTAINS:
        return Contains(flt.column, value)
    if flt.kind == FilterKind.HAS_ELEMENT:
        return HasElement(flt.column, value)
    if flt.kind in (FilterKind.DATE_RANGE, FilterKind.NUMBER_RANGE):
        lower, upper = value
        return Range(flt.column, lower, upper)
    if flt.kind == FilterKind.AUTHORS:
        return AuthoredBy(flt.capacity, value)
    raise ValueError(f"Unsupported filter kind: {flt.kind}")


def build_predicate(scope: Predicate, filters: FilterParams, spec: "ResourceSpec") -> Predicate:
    """
    Все заданные фильтры через AND, затем OR-поиск по полям spec.search_fields,
    последним добавляется scope: фильтры не могут ослабить видимость.
    """
    parts: list[Predicate] = [
        _filter_predicate(flt, filters.values[flt.param])
        for flt in spec.filters
        if flt.param in filters.values
    ]
    if filters.search:
        parts.append(or_(*(Contains(f, filters.search) for f in spec.search_fields)))
    return and_(*parts, scope)
