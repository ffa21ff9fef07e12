"""Авторские права: четыре независимых диапазона дат этапов регистрации."""
from app.modules.copyright.model import Copyright, CopyrightAuthor
from app.modules.copyright.schemas import CopyrightOut, CopyrightWrite
from app.modules.research.csv_export import CsvColumn, CsvKind, attr
from app.modules.research.enums import AuthorCapacity, ResearchStatus, TeacherStatus
from app.modules.research.filters import FilterField, FilterKind
from app.modules.research.registry import RequiredField, ResourceSpec
from app.modules.research.router import build_router

COPYRIGHT = ResourceSpec(
    slug="copyright",
    singular="copyright",
    plural="copyrights",
    label="copyright",
    model=Copyright,
    author_model=CopyrightAuthor,
    create_schema=CopyrightWrite,
    update_schema=CopyrightWrite,
    out_schema=CopyrightOut,
    filters=(
        FilterField("status", FilterKind.ENUM, "status", ResearchStatus),
        FilterField("teacherStatus", FilterKind.ENUM, "teacher_status", TeacherStatus),
        FilterField("isPublic", FilterKind.BOOL, "is_public"),
        FilterField("regNo", FilterKind.CONTAINS, "reg_no"),
        FilterField("created", FilterKind.DATE_RANGE, "created_at"),
        FilterField("filing", FilterKind.DATE_RANGE, "date_of_filing"),
        FilterField("submission", FilterKind.DATE_RANGE, "date_of_submission"),
        FilterField("published", FilterKind.DATE_RANGE, "date_of_published"),
        FilterField("grant", FilterKind.DATE_RANGE, "date_of_grant"),
        FilterField("registrationFees", FilterKind.NUMBER_RANGE, "registration_fees"),
        FilterField("reimbursement", FilterKind.NUMBER_RANGE, "reimbursement"),
        FilterField("facultyAuthorIds", FilterKind.AUTHORS, capacity=AuthorCapacity.FACULTY),
        FilterField("studentAuthorIds", FilterKind.AUTHORS, capacity=AuthorCapacity.STUDENT),
    ),
    search_fields=("title", "abstract", "reg_no"),
    csv_columns=(
        CsvColumn("ID", attr("id"), CsvKind.RAW),
        CsvColumn("Registration No", attr("reg_no")),
        CsvColumn("Title", attr("title")),
        CsvColumn("Abstract", attr("abstract")),
        CsvColumn("Status", attr("status"), CsvKind.RAW),
        CsvColumn("Teacher Status", attr("teacher_status"), CsvKind.RAW),
        CsvColumn("Date of Filing", attr("date_of_filing"), CsvKind.DATETIME),
        CsvColumn("Date of Submission", attr("date_of_submission"), CsvKind.DATETIME),
        CsvColumn("Date of Published", attr("date_of_published"), CsvKind.DATETIME),
        CsvColumn("Date of Grant", attr("date_of_grant"), CsvKind.DATETIME),
        CsvColumn("Registration Fees", attr("registration_fees"), CsvKind.NUMBER),
        CsvColumn("Reimbursement", attr("reimbursement"), CsvKind.NUMBER),
        CsvColumn("Is Public", attr("is_public"), CsvKind.BOOL),
        CsvColumn("Student Authors", attr("student_authors"), CsvKind.AUTHORS),
        CsvColumn("Faculty Authors", attr("faculty_authors"), CsvKind.AUTHORS),
        CsvColumn("Created At", attr("created_at"), CsvKind.DATETIME),
        CsvColumn("Updated At", attr("updated_at"), CsvKind.DATETIME),
        CsvColumn("Document URL", attr("document_url")),
        CsvColumn("Image URL", attr("image_url")),
    ),
    required_fields=(
        RequiredField("reg_no", "Registration number is required"),
        RequiredField("title", "Title is required"),
    ),
    enum_fields={"status": ResearchStatus, "teacher_status": TeacherStatus},
    authors_required=True,
)

router = build_router(COPYRIGHT)
