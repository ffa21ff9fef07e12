"""Схемы API авторских прав."""
from datetime import datetime

from app.modules.research.schemas import PublicationOut, PublicationWrite


class CopyrightWrite(PublicationWrite):
    reg_no: str | None = None
    date_of_filing: datetime | None = None
    date_of_submission: datetime | None = None
    date_of_published: datetime | None = None
    date_of_grant: datetime | None = None


class CopyrightOut(PublicationOut):
    reg_no: str
    date_of_filing: datetime | None = None
    date_of_submission: datetime | None = None
    date_of_published: datetime | None = None
    date_of_grant: datetime | None = None
