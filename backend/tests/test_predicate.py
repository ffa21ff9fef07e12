from datetime import datetime, timezone
from types import SimpleNamespace

from sqlalchemy.dialects import postgresql, sqlite

from app.modules.journal.resource import JOURNAL
from app.modules.research.enums import AuthorCapacity, ResearchStatus
from app.modules.research.predicate import (
    TRUE,
    And,
    AuthoredBy,
    Contains,
    Eq,
    HasElement,
    Or,
    Range,
    and_,
    compile_predicate,
    evaluate,
    or_,
)


def _sql(pred, dialect_name: str = "postgresql") -> str:
    dialect = postgresql.dialect() if dialect_name == "postgresql" else sqlite.dialect()
    return str(compile_predicate(pred, JOURNAL, dialect_name).compile(dialect=dialect))


def _record(**overrides):
    base = dict(
        is_public=False,
        status=ResearchStatus.SUBMITTED,
        title="Deep Learning for Crops",
        publisher=None,
        keywords=["ml", "agri"],
        registration_fees=100.0,
        created_at=datetime(2024, 3, 1, 10, 0),
        authors=[
            SimpleNamespace(user_id="f1", capacity=AuthorCapacity.FACULTY),
            SimpleNamespace(user_id="s1", capacity=AuthorCapacity.STUDENT),
        ],
    )
    base.update(overrides)
    return SimpleNamespace(**base)


def test_and_flattens_and_drops_true() -> None:
    a, b, c = Eq("is_public", True), Contains("title", "x"), Eq("status", "DRAFT")
    assert and_(TRUE, a) == a
    assert and_() == TRUE
    assert and_(And((a, b)), TRUE, c) == And((a, b, c))


def test_or_is_absorbed_by_true() -> None:
    a, b = Eq("is_public", True), Contains("title", "x")
    assert or_(a, TRUE) == TRUE
    assert or_(Or((a,)), b) == Or((a, b))
    assert or_(a) == a


def test_compile_contains_is_case_insensitive_and_escaped() -> None:
    sql = _sql(Contains("publisher", "50%_off"))
    assert "ILIKE" in sql.upper()
    compiled = compile_predicate(Contains("publisher", "50%_off"), JOURNAL, "postgresql").compile(
        dialect=postgresql.dialect()
    )
    assert "%50\\%\\_off%" in compiled.params.values()


def test_compile_has_element_uses_jsonb_containment_on_postgres() -> None:
    assert "@>" in _sql(HasElement("keywords", "ml"))


def test_compile_has_element_uses_json_each_elsewhere() -> None:
    sql = _sql(HasElement("keywords", "ml"), "sqlite")
    assert "json_each" in sql
    assert "EXISTS" in sql.upper()


def test_compile_authored_by_checks_capacity_in_authorship_table() -> None:
    sql = _sql(AuthoredBy(AuthorCapacity.STUDENT, ("s1",)))
    assert "EXISTS" in sql.upper()
    assert "journal_authors.user_id IN" in sql
    assert "journal_authors.capacity" in sql


def test_compile_range_with_single_bound() -> None:
    sql = _sql(Range("registration_fees", lower=10))
    assert "journals.registration_fees >=" in sql
    assert "<=" not in sql


def test_compile_empty_or_matches_nothing() -> None:
    assert _sql(Or(())).lower() == "false"


def test_evaluate_matches_sql_semantics() -> None:
    record = _record()
    assert evaluate(TRUE, record)
    assert evaluate(Contains("title", "LEARNING"), record)
    assert not evaluate(Contains("publisher", "x"), record)  # NULL не совпадает
    assert evaluate(HasElement("keywords", "ml"), record)
    assert not evaluate(HasElement("keywords", "bio"), record)
    assert evaluate(Range("registration_fees", 100, 100), record)
    assert not evaluate(Range("registration_fees", upper=99.99), record)
    assert evaluate(Eq("status", "SUBMITTED"), record)


def test_evaluate_date_range_accepts_naive_stored_values() -> None:
    record = _record()
    lower = datetime(2024, 3, 1, tzinfo=timezone.utc)
    upper = datetime(2024, 3, 1, 23, 59, 59, tzinfo=timezone.utc)
    assert evaluate(Range("created_at", lower, upper), record)
    assert not evaluate(Range("created_at", upper=lower), record)


def test_evaluate_authored_by_requires_matching_capacity() -> None:
    record = _record()
    assert evaluate(AuthoredBy(AuthorCapacity.STUDENT, ("s1",)), record)
    assert not evaluate(AuthoredBy(AuthorCapacity.FACULTY, ("s1",)), record)
    assert not evaluate(AuthoredBy(AuthorCapacity.STUDENT, ("s2",)), record)
