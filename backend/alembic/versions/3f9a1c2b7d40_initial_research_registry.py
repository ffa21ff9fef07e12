"""Initial research registry schema

Revision ID: 3f9a1c2b7d40
Revises:
Create Date: 2026-10-18

Пользователи, special users, журналы, главы книг, авторские права и строки авторства.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f9a1c2b7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ENUMS = {
    "user_role": ("ADMIN", "FACULTY", "STUDENT"),
    "author_capacity": ("FACULTY", "STUDENT"),
    "research_status": (
        "DRAFT",
        "SUBMITTED",
        "UNDER_REVIEW",
        "REVISION",
        "APPROVED",
        "PUBLISHED",
        "REJECTED",
    ),
    "teacher_status": ("UPLOADED", "ACCEPTED", "PUBLISHED", "UPDATE"),
    "journal_scope": ("INTERNATIONAL", "NATIONAL"),
    "journal_review_type": ("PEER_REVIEWED", "NON_PEER_REVIEWED"),
    "journal_access_type": ("OPEN_ACCESS", "SUBSCRIPTION", "HYBRID"),
    "journal_indexing": ("SCOPUS", "WEB_OF_SCIENCE", "SCI", "UGC_CARE", "PEER_REVIEWED", "OTHER"),
    "journal_quartile": ("Q1", "Q2", "Q3", "Q4", "NOT_APPLICABLE"),
    "journal_publication_mode": ("ONLINE", "PRINT", "ONLINE_AND_PRINT"),
}


def _enum(name: str) -> postgresql.ENUM:
    # типы создаются один раз в upgrade(), таблицы только ссылаются на них
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _publication_columns() -> list[sa.Column]:
    """Колонки, общие для journals, book_chapters и copyrights."""
    return [
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("abstract", sa.Text(), nullable=True),
        sa.Column(
            "image_url",
            sa.Text(),
            nullable=True,
            comment="Ссылка на изображение во внешнем хранилище",
        ),
        sa.Column(
            "document_url",
            sa.Text(),
            nullable=True,
            comment="Ссылка на документ во внешнем хранилище",
        ),
        sa.Column("status", _enum("research_status"), nullable=False),
        sa.Column("teacher_status", _enum("teacher_status"), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("registration_fees", sa.Float(), nullable=True),
        sa.Column("reimbursement", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def _publication_indexes(table: str) -> None:
    for column in ("status", "teacher_status", "is_public", "created_at"):
        op.create_index(op.f(f"ix_{table}_{column}"), table, [column], unique=False)


def _create_author_table(table: str, parent: str) -> None:
    op.create_table(
        table,
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("record_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("capacity", _enum("author_capacity"), nullable=False),
        sa.ForeignKeyConstraint(["record_id"], [f"{parent}.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "record_id",
            "user_id",
            "capacity",
            name=f"uq_{table}_record_user_capacity",
        ),
    )
    op.create_index(op.f(f"ix_{table}_record_id"), table, ["record_id"], unique=False)
    op.create_index(op.f(f"ix_{table}_user_id"), table, ["user_id"], unique=False)


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("image", sa.String(length=1024), nullable=True),
        sa.Column("role", _enum("user_role"), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)
    op.create_index(op.f("ix_users_role"), "users", ["role"], unique=False)

    op.create_table(
        "special_users",
        sa.Column(
            "id",
            sa.String(length=36),
            nullable=False,
            comment="Уникальный идентификатор записи",
        ),
        sa.Column(
            "email",
            sa.String(length=255),
            nullable=False,
            comment="E-mail пользователя (в нижнем регистре)",
        ),
        sa.Column(
            "role",
            _enum("user_role"),
            nullable=False,
            comment="Роль, которая будет выдана при входе",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="Дата и время создания",
        ),
        sa.PrimaryKeyConstraint("id"),
        comment="Назначение ролей по e-mail (ADMIN/FACULTY/STUDENT)",
    )
    op.create_index(op.f("ix_special_users_email"), "special_users", ["email"], unique=True)

    op.create_table(
        "journals",
        *_publication_columns(),
        sa.Column(
            "serial_no",
            sa.String(length=255),
            nullable=False,
            comment="Серийный номер статьи (уникальный)",
        ),
        sa.Column("journal_name", sa.Text(), nullable=False),
        sa.Column("scope", _enum("journal_scope"), nullable=False),
        sa.Column("review_type", _enum("journal_review_type"), nullable=False),
        sa.Column("access_type", _enum("journal_access_type"), nullable=False),
        sa.Column("indexing", _enum("journal_indexing"), nullable=False),
        sa.Column("quartile", _enum("journal_quartile"), nullable=False),
        sa.Column("publication_mode", _enum("journal_publication_mode"), nullable=False),
        sa.Column("impact_factor", sa.Float(), nullable=True),
        sa.Column(
            "impact_factor_date",
            sa.DateTime(timezone=True),
            nullable=True,
            comment="На какую дату указан impact factor",
        ),
        sa.Column("publisher", sa.Text(), nullable=True),
        sa.Column("publication_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("doi", sa.String(length=255), nullable=True),
        sa.Column("paper_link", sa.Text(), nullable=True),
        sa.Column(
            "keywords",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
            comment="Ключевые слова (список строк)",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("serial_no"),
    )
    _publication_indexes("journals")
    op.create_index(op.f("ix_journals_scope"), "journals", ["scope"], unique=False)
    op.create_index(op.f("ix_journals_indexing"), "journals", ["indexing"], unique=False)
    # Фильтр keyword: keywords @> '["..."]'
    op.create_index(
        "gin_journals_keywords",
        "journals",
        ["keywords"],
        postgresql_using="gin",
    )

    op.create_table(
        "book_chapters",
        *_publication_columns(),
        sa.Column(
            "isbn_issn",
            sa.String(length=255),
            nullable=True,
            comment="ISBN или ISSN издания",
        ),
        sa.Column("publisher", sa.Text(), nullable=True),
        sa.Column("doi", sa.String(length=255), nullable=True),
        sa.Column("publication_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "keywords",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    _publication_indexes("book_chapters")
    op.create_index(
        "gin_book_chapters_keywords",
        "book_chapters",
        ["keywords"],
        postgresql_using="gin",
    )

    op.create_table(
        "copyrights",
        *_publication_columns(),
        sa.Column(
            "reg_no",
            sa.String(length=255),
            nullable=False,
            comment="Регистрационный номер",
        ),
        sa.Column("date_of_filing", sa.DateTime(timezone=True), nullable=True),
        sa.Column("date_of_submission", sa.DateTime(timezone=True), nullable=True),
        sa.Column("date_of_published", sa.DateTime(timezone=True), nullable=True),
        sa.Column("date_of_grant", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _publication_indexes("copyrights")
    op.create_index(op.f("ix_copyrights_reg_no"), "copyrights", ["reg_no"], unique=False)

    _create_author_table("journal_authors", "journals")
    _create_author_table("book_chapter_authors", "book_chapters")
    _create_author_table("copyright_authors", "copyrights")


def downgrade() -> None:
    """Downgrade schema."""
    for table in ("copyright_authors", "book_chapter_authors", "journal_authors"):
        op.drop_table(table)
    op.drop_table("copyrights")
    op.drop_table("book_chapters")
    op.drop_table("journals")
    op.drop_table("special_users")
    op.drop_table("users")

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
