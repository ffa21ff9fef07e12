"""SQLAlchemy-модели авторских прав и их авторов."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.modules.research.model import AuthorshipMixin, PublicationMixin


class Copyright(PublicationMixin, Base):
    """Регистрация авторского права: четыре независимые даты этапов."""

    __tablename__ = "copyrights"

    reg_no: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Регистрационный номер",
    )
    date_of_filing: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    date_of_submission: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    date_of_published: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    date_of_grant: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    authors: Mapped[list["CopyrightAuthor"]] = relationship(
        back_populates="copyright",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class CopyrightAuthor(AuthorshipMixin, Base):
    __tablename__ = "copyright_authors"
    __table_args__ = (
        UniqueConstraint(
            "record_id",
            "user_id",
            "capacity",
            name="uq_copyright_authors_record_user_capacity",
        ),
    )

    record_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("copyrights.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    copyright: Mapped["Copyright"] = relationship(back_populates="authors")
