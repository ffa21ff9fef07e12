"""
Выгрузка записей в CSV.

Текстовые и списочные поля оборачиваются в кавычки (внутренние " удваиваются),
id, enum-значения, числа, булевы и даты выводятся как есть. Строки через \\n,
первая строка содержит заголовок.
"""
import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable


class CsvKind(str, enum.Enum):
    RAW = "RAW"
    TEXT = "TEXT"
    LIST = "LIST"
    AUTHORS = "AUTHORS"
    NUMBER = "NUMBER"
    BOOL = "BOOL"
    DATETIME = "DATETIME"


@dataclass(frozen=True)
class CsvColumn:
    header: str
    getter: Callable[[Any], Any]
    kind: CsvKind = CsvKind.TEXT


def attr(name: str) -> Callable[[Any], Any]:
    """Getter по имени атрибута записи."""
    return lambda record: getattr(record, name)


def quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def format_author(author: Any) -> str:
    """«Имя (email)» для строки авторства (или пользователя)."""
    user = getattr(author, "user", author)
    return f"{user.name or ''} ({user.email or ''})"


def format_cell(value: Any, kind: CsvKind) -> str:
    if kind == CsvKind.TEXT:
        return quote("" if value is None else str(value))
    if kind == CsvKind.LIST:
        return quote("; ".join(str(v) for v in (value or [])))
    if kind == CsvKind.AUTHORS:
        return quote("; ".join(format_author(a) for a in (value or [])))
    if value is None:
        return ""
    if isinstance(value, enum.Enum):
        return str(value.value)
    if kind == CsvKind.BOOL:
        return "true" if value else "false"
    if kind == CsvKind.NUMBER:
        return _format_number(value)
    if kind == CsvKind.DATETIME:
        return _format_datetime(value)
    return str(value)


def to_csv(rows: Iterable[Any], columns: Iterable[CsvColumn]) -> str:
    """Собрать CSV по фиксированному списку колонок. Пагинация не применяется."""
    columns = list(columns)
    lines = [",".join(col.header for col in columns)]
    for row in rows:
        lines.append(",".join(format_cell(col.getter(row), col.kind) for col in columns))
    return "\n".join(lines)


def export_filename(plural: str, now: datetime | None = None) -> str:
    moment = now or datetime.now(timezone.utc)
    return f"{plural}-{_format_datetime(moment)}.csv"
