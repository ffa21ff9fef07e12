"""SQLAlchemy-модели глав книг и их авторов."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, JSONList
from app.modules.research.model import AuthorshipMixin, PublicationMixin


class BookChapter(PublicationMixin, Base):
    __tablename__ = "book_chapters"

    isbn_issn: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="ISBN или ISSN издания",
    )
    publisher: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    doi: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    publication_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    keywords: Mapped[list] = mapped_column(
        JSONList,
        default=list,
        nullable=False,
    )

    authors: Mapped[list["BookChapterAuthor"]] = relationship(
        back_populates="book_chapter",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class BookChapterAuthor(AuthorshipMixin, Base):
    __tablename__ = "book_chapter_authors"
    __table_args__ = (
        UniqueConstraint(
            "record_id",
            "user_id",
            "capacity",
            name="uq_book_chapter_authors_record_user_capacity",
        ),
    )

    record_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("book_chapters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    book_chapter: Mapped["BookChapter"] = relationship(back_populates="authors")
