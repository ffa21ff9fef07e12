import uuid

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

# JSON-список: JSONB в Postgres, обычный JSON в остальных СУБД (sqlite в тестах)
JSONList = JSON().with_variant(JSONB(), "postgresql")


def new_id() -> str:
    """Непрозрачный строковый идентификатор записи."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass
