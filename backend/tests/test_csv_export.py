import csv
import io
from datetime import datetime, timezone
from types import SimpleNamespace

from app.modules.research.csv_export import (
    CsvColumn,
    CsvKind,
    attr,
    export_filename,
    format_author,
    format_cell,
    to_csv,
)
from app.modules.research.enums import ResearchStatus


def _author(name, email):
    return SimpleNamespace(user=SimpleNamespace(name=name, email=email))


COLUMNS = (
    CsvColumn("ID", attr("id"), CsvKind.RAW),
    CsvColumn("Title", attr("title")),
    CsvColumn("Status", attr("status"), CsvKind.RAW),
    CsvColumn("Fees", attr("fees"), CsvKind.NUMBER),
    CsvColumn("Is Public", attr("is_public"), CsvKind.BOOL),
    CsvColumn("Created At", attr("created_at"), CsvKind.DATETIME),
    CsvColumn("Keywords", attr("keywords"), CsvKind.LIST),
    CsvColumn("Authors", attr("authors"), CsvKind.AUTHORS),
)


def _row(**overrides):
    base = dict(
        id="r1",
        title='Hello, "World"',
        status=ResearchStatus.PUBLISHED,
        fees=1500.0,
        is_public=True,
        created_at=datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc),
        keywords=["ml", "agri"],
        authors=[_author("Ann", "ann@university.edu"), _author("Bob", "bob@university.edu")],
    )
    base.update(overrides)
    return SimpleNamespace(**base)


def test_header_comes_first_and_rows_follow() -> None:
    body = to_csv([_row(), _row(id="r2")], COLUMNS)
    lines = body.split("\n")
    assert lines[0] == "ID,Title,Status,Fees,Is Public,Created At,Keywords,Authors"
    assert len(lines) == 3


def test_quoted_text_survives_a_csv_parser() -> None:
    body = to_csv([_row()], COLUMNS)
    rows = list(csv.reader(io.StringIO(body)))
    assert rows[1] == [
        "r1",
        'Hello, "World"',
        "PUBLISHED",
        "1500",
        "true",
        "2024-05-06T07:08:09Z",
        "ml; agri",
        "Ann (ann@university.edu); Bob (bob@university.edu)",
    ]


def test_empty_values() -> None:
    assert format_cell(None, CsvKind.TEXT) == '""'
    assert format_cell(None, CsvKind.NUMBER) == ""
    assert format_cell(None, CsvKind.DATETIME) == ""
    assert format_cell([], CsvKind.AUTHORS) == '""'
    assert format_cell(12.5, CsvKind.NUMBER) == "12.5"
    assert format_cell(False, CsvKind.BOOL) == "false"


def test_naive_datetime_is_treated_as_utc() -> None:
    assert format_cell(datetime(2024, 1, 2, 3, 4, 5), CsvKind.DATETIME) == "2024-01-02T03:04:05Z"


def test_no_rows_gives_header_only() -> None:
    assert to_csv([], COLUMNS).count("\n") == 0


def test_author_without_name() -> None:
    assert format_author(_author(None, "x@university.edu")) == " (x@university.edu)"


def test_export_filename_uses_plural_and_timestamp() -> None:
    name = export_filename("journals", datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
    assert name == "journals-2024-01-01T12:00:00Z.csv"
