"""Журнальные статьи: фильтры, поиск, колонки CSV, правила создания."""
from app.modules.journal.model import Journal, JournalAuthor
from app.modules.journal.schemas import JournalOut, JournalWrite
from app.modules.research.csv_export import CsvColumn, CsvKind, attr
from app.modules.research.enums import (
    AuthorCapacity,
    JournalAccessType,
    JournalIndexing,
    JournalPublicationMode,
    JournalQuartile,
    JournalReviewType,
    JournalScope,
    ResearchStatus,
    TeacherStatus,
)
from app.modules.research.filters import FilterField, FilterKind
from app.modules.research.registry import RequiredField, ResourceSpec
from app.modules.research.router import build_router
from app.modules.research.scope import ScopePolicy

JOURNAL = ResourceSpec(
    slug="journal",
    singular="journal",
    plural="journals",
    label="journal",
    model=Journal,
    author_model=JournalAuthor,
    create_schema=JournalWrite,
    update_schema=JournalWrite,
    out_schema=JournalOut,
    filters=(
        FilterField("status", FilterKind.ENUM, "status", ResearchStatus),
        FilterField("teacherStatus", FilterKind.ENUM, "teacher_status", TeacherStatus),
        FilterField("isPublic", FilterKind.BOOL, "is_public"),
        FilterField("scope", FilterKind.ENUM, "scope", JournalScope),
        FilterField("reviewType", FilterKind.ENUM, "review_type", JournalReviewType),
        FilterField("accessType", FilterKind.ENUM, "access_type", JournalAccessType),
        FilterField("indexing", FilterKind.ENUM, "indexing", JournalIndexing),
        FilterField("quartile", FilterKind.ENUM, "quartile", JournalQuartile),
        FilterField("publicationMode", FilterKind.ENUM, "publication_mode", JournalPublicationMode),
        FilterField("keyword", FilterKind.HAS_ELEMENT, "keywords"),
        FilterField("publisher", FilterKind.CONTAINS, "publisher"),
        FilterField("serialNo", FilterKind.CONTAINS, "serial_no"),
        FilterField("created", FilterKind.DATE_RANGE, "created_at"),
        FilterField("published", FilterKind.DATE_RANGE, "publication_date"),
        FilterField("registrationFees", FilterKind.NUMBER_RANGE, "registration_fees"),
        FilterField("reimbursement", FilterKind.NUMBER_RANGE, "reimbursement"),
        FilterField("impactFactor", FilterKind.NUMBER_RANGE, "impact_factor"),
        FilterField("facultyAuthorIds", FilterKind.AUTHORS, capacity=AuthorCapacity.FACULTY),
        FilterField("studentAuthorIds", FilterKind.AUTHORS, capacity=AuthorCapacity.STUDENT),
    ),
    search_fields=("title", "journal_name", "abstract", "publisher", "serial_no", "doi"),
    csv_columns=(
        CsvColumn("ID", attr("id"), CsvKind.RAW),
        CsvColumn("Serial No", attr("serial_no")),
        CsvColumn("Title", attr("title")),
        CsvColumn("Journal Name", attr("journal_name")),
        CsvColumn("Abstract", attr("abstract")),
        CsvColumn("Scope", attr("scope"), CsvKind.RAW),
        CsvColumn("Review Type", attr("review_type"), CsvKind.RAW),
        CsvColumn("Access Type", attr("access_type"), CsvKind.RAW),
        CsvColumn("Indexing", attr("indexing"), CsvKind.RAW),
        CsvColumn("Quartile", attr("quartile"), CsvKind.RAW),
        CsvColumn("Publication Mode", attr("publication_mode"), CsvKind.RAW),
        CsvColumn("Status", attr("status"), CsvKind.RAW),
        CsvColumn("Teacher Status", attr("teacher_status"), CsvKind.RAW),
        CsvColumn("Impact Factor", attr("impact_factor"), CsvKind.NUMBER),
        CsvColumn("Impact Factor Date", attr("impact_factor_date"), CsvKind.DATETIME),
        CsvColumn("Publisher", attr("publisher")),
        CsvColumn("Paper Link", attr("paper_link")),
        CsvColumn("DOI", attr("doi")),
        CsvColumn("Publication Date", attr("publication_date"), CsvKind.DATETIME),
        CsvColumn("Registration Fees", attr("registration_fees"), CsvKind.NUMBER),
        CsvColumn("Reimbursement", attr("reimbursement"), CsvKind.NUMBER),
        CsvColumn("Is Public", attr("is_public"), CsvKind.BOOL),
        CsvColumn("Keywords", attr("keywords"), CsvKind.LIST),
        CsvColumn("Student Authors", attr("student_authors"), CsvKind.AUTHORS),
        CsvColumn("Faculty Authors", attr("faculty_authors"), CsvKind.AUTHORS),
        CsvColumn("Created At", attr("created_at"), CsvKind.DATETIME),
        CsvColumn("Updated At", attr("updated_at"), CsvKind.DATETIME),
        CsvColumn("Image URL", attr("image_url")),
        CsvColumn("Document URL", attr("document_url")),
    ),
    # Не-админ в списке и выгрузке видит только журналы, где он автор
    list_policy=ScopePolicy.AUTHORED_ONLY,
    required_fields=(
        RequiredField("serial_no", "Serial number is required"),
        RequiredField("title", "Title is required"),
        RequiredField("journal_name", "Journal name is required"),
    ),
    enum_fields={
        "status": ResearchStatus,
        "teacher_status": TeacherStatus,
        "scope": JournalScope,
        "review_type": JournalReviewType,
        "access_type": JournalAccessType,
        "indexing": JournalIndexing,
        "quartile": JournalQuartile,
        "publication_mode": JournalPublicationMode,
    },
    required_enums=("scope", "review_type", "access_type", "indexing", "publication_mode"),
    unique_fields=(("serial_no", "serial number"),),
    authors_required=True,
    stats_groups=(("scopeCounts", "scope"), ("indexingCounts", "indexing")),
    stats_averages=(("avgImpactFactor", "impact_factor"),),
)

router = build_router(JOURNAL)
