"""
Описание вида записи (журнал, глава книги, авторское право) в одном месте.

Роутер, валидаторы, выгрузка и статистика работают поверх ResourceSpec и не
знают о конкретных моделях.
"""
import enum
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy import JSON, inspect

from app.modules.research.csv_export import CsvColumn
from app.modules.research.filters import FilterField
from app.modules.research.scope import ScopePolicy


@dataclass(frozen=True)
class RequiredField:
    """Обязательная непустая строка при создании; message уходит клиенту."""

    field: str
    message: str


@dataclass(frozen=True)
class ResourceSpec:
    slug: str  # сегмент URL: journal, book-chapter, copyright
    singular: str  # ключ ответа с одной записью
    plural: str  # ключ ответа со списком, префикс имени CSV-файла
    label: str  # для логов и сообщений об ошибках
    model: Any
    author_model: Any
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    out_schema: type[BaseModel]
    filters: tuple[FilterField, ...]
    search_fields: tuple[str, ...]
    csv_columns: tuple[CsvColumn, ...]
    list_policy: ScopePolicy = ScopePolicy.PUBLIC_OR_AUTHORED
    required_fields: tuple[RequiredField, ...] = ()
    # enum-поля модели: на создании из required_enums обязательны
    enum_fields: dict[str, type[enum.Enum]] = field(default_factory=dict)
    required_enums: tuple[str, ...] = ()
    # уникальные поля: (атрибут, подпись для сообщения)
    unique_fields: tuple[tuple[str, str], ...] = ()
    authors_required: bool = True
    # статистика: (ключ ответа, атрибут) для группировок и средних
    stats_groups: tuple[tuple[str, str], ...] = ()
    stats_averages: tuple[tuple[str, str], ...] = ()

    def sortable_fields(self) -> dict[str, str]:
        """camelCase-имя -> атрибут для скалярных колонок модели (JSON-списки не сортируются)."""
        return {
            to_camel(column_attr.key): column_attr.key
            for column_attr in inspect(self.model).column_attrs
            if not isinstance(column_attr.columns[0].type, JSON)
        }
