"""Схемы API глав книг."""
from datetime import datetime

from app.modules.research.schemas import PublicationOut, PublicationWrite


class BookChapterWrite(PublicationWrite):
    isbn_issn: str | None = None
    publisher: str | None = None
    doi: str | None = None
    publication_date: datetime | None = None
    keywords: list[str] | None = None


class BookChapterOut(PublicationOut):
    isbn_issn: str | None = None
    publisher: str | None = None
    doi: str | None = None
    publication_date: datetime | None = None
    keywords: list[str] = []
