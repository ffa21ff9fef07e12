"""SQLAlchemy-модели журнальных статей и их авторов."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import Enum as SAEnum

from app.db.base import Base, JSONList
from app.modules.research.enums import (
    JournalAccessType,
    JournalIndexing,
    JournalPublicationMode,
    JournalQuartile,
    JournalReviewType,
    JournalScope,
)
from app.modules.research.model import AuthorshipMixin, PublicationMixin


class Journal(PublicationMixin, Base):
    """Статья в журнале. serial_no уникален глобально."""

    __tablename__ = "journals"

    serial_no: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="Серийный номер статьи (уникальный)",
    )
    journal_name: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    scope: Mapped[JournalScope] = mapped_column(
        SAEnum(JournalScope, name="journal_scope"),
        nullable=False,
        index=True,
    )
    review_type: Mapped[JournalReviewType] = mapped_column(
        SAEnum(JournalReviewType, name="journal_review_type"),
        nullable=False,
    )
    access_type: Mapped[JournalAccessType] = mapped_column(
        SAEnum(JournalAccessType, name="journal_access_type"),
        nullable=False,
    )
    indexing: Mapped[JournalIndexing] = mapped_column(
        SAEnum(JournalIndexing, name="journal_indexing"),
        nullable=False,
        index=True,
    )
    quartile: Mapped[JournalQuartile] = mapped_column(
        SAEnum(JournalQuartile, name="journal_quartile"),
        default=JournalQuartile.NOT_APPLICABLE,
        nullable=False,
    )
    publication_mode: Mapped[JournalPublicationMode] = mapped_column(
        SAEnum(JournalPublicationMode, name="journal_publication_mode"),
        nullable=False,
    )
    impact_factor: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
    )
    impact_factor_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="На какую дату указан impact factor",
    )
    publisher: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    publication_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    doi: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    paper_link: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    keywords: Mapped[list] = mapped_column(
        JSONList,
        default=list,
        nullable=False,
        comment="Ключевые слова (список строк)",
    )

    authors: Mapped[list["JournalAuthor"]] = relationship(
        back_populates="journal",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class JournalAuthor(AuthorshipMixin, Base):
    __tablename__ = "journal_authors"
    __table_args__ = (
        UniqueConstraint(
            "record_id",
            "user_id",
            "capacity",
            name="uq_journal_authors_record_user_capacity",
        ),
    )

    record_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("journals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    journal: Mapped["Journal"] = relationship(back_populates="authors")
