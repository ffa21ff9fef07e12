"""Главы книг. Списки авторов на сервере могут быть пустыми."""
from app.modules.book_chapter.model import BookChapter, BookChapterAuthor
from app.modules.book_chapter.schemas import BookChapterOut, BookChapterWrite
from app.modules.research.csv_export import CsvColumn, CsvKind, attr
from app.modules.research.enums import AuthorCapacity, ResearchStatus, TeacherStatus
from app.modules.research.filters import FilterField, FilterKind
from app.modules.research.registry import RequiredField, ResourceSpec
from app.modules.research.router import build_router

BOOK_CHAPTER = ResourceSpec(
    slug="book-chapter",
    singular="bookChapter",
    plural="bookChapters",
    label="book chapter",
    model=BookChapter,
    author_model=BookChapterAuthor,
    create_schema=BookChapterWrite,
    update_schema=BookChapterWrite,
    out_schema=BookChapterOut,
    filters=(
        FilterField("status", FilterKind.ENUM, "status", ResearchStatus),
        FilterField("teacherStatus", FilterKind.ENUM, "teacher_status", TeacherStatus),
        FilterField("isPublic", FilterKind.BOOL, "is_public"),
        FilterField("keyword", FilterKind.HAS_ELEMENT, "keywords"),
        FilterField("publisher", FilterKind.CONTAINS, "publisher"),
        FilterField("isbnIssn", FilterKind.CONTAINS, "isbn_issn"),
        FilterField("created", FilterKind.DATE_RANGE, "created_at"),
        FilterField("published", FilterKind.DATE_RANGE, "publication_date"),
        FilterField("registrationFees", FilterKind.NUMBER_RANGE, "registration_fees"),
        FilterField("reimbursement", FilterKind.NUMBER_RANGE, "reimbursement"),
        FilterField("facultyAuthorIds", FilterKind.AUTHORS, capacity=AuthorCapacity.FACULTY),
        FilterField("studentAuthorIds", FilterKind.AUTHORS, capacity=AuthorCapacity.STUDENT),
    ),
    search_fields=("title", "abstract", "publisher", "isbn_issn", "doi"),
    csv_columns=(
        CsvColumn("ID", attr("id"), CsvKind.RAW),
        CsvColumn("Title", attr("title")),
        CsvColumn("Abstract", attr("abstract")),
        CsvColumn("Status", attr("status"), CsvKind.RAW),
        CsvColumn("Teacher Status", attr("teacher_status"), CsvKind.RAW),
        CsvColumn("ISBN/ISSN", attr("isbn_issn")),
        CsvColumn("Publisher", attr("publisher")),
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
        CsvColumn("Document URL", attr("document_url")),
        CsvColumn("Image URL", attr("image_url")),
    ),
    required_fields=(RequiredField("title", "Title is required"),),
    enum_fields={"status": ResearchStatus, "teacher_status": TeacherStatus},
    authors_required=False,
)

router = build_router(BOOK_CHAPTER)
