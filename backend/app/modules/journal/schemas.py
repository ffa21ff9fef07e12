"""Схемы API журнальных статей."""
from datetime import datetime

from app.modules.research.enums import (
    JournalAccessType,
    JournalIndexing,
    JournalPublicationMode,
    JournalQuartile,
    JournalReviewType,
    JournalScope,
)
from app.modules.research.schemas import PublicationOut, PublicationWrite


class JournalWrite(PublicationWrite):
    serial_no: str | None = None
    journal_name: str | None = None
    scope: str | None = None
    review_type: str | None = None
    access_type: str | None = None
    indexing: str | None = None
    quartile: str | None = None
    publication_mode: str | None = None
    impact_factor: float | None = None
    impact_factor_date: datetime | None = None
    publisher: str | None = None
    publication_date: datetime | None = None
    doi: str | None = None
    paper_link: str | None = None
    keywords: list[str] | None = None


class JournalOut(PublicationOut):
    serial_no: str
    journal_name: str
    scope: JournalScope
    review_type: JournalReviewType
    access_type: JournalAccessType
    indexing: JournalIndexing
    quartile: JournalQuartile
    publication_mode: JournalPublicationMode
    impact_factor: float | None = None
    impact_factor_date: datetime | None = None
    publisher: str | None = None
    publication_date: datetime | None = None
    doi: str | None = None
    paper_link: str | None = None
    keywords: list[str] = []
