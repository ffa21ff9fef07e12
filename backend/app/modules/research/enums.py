"""Закрытые перечисления: роли пользователей, статусы и категории публикаций."""

import enum


class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    FACULTY = "FACULTY"
    STUDENT = "STUDENT"


class AuthorCapacity(str, enum.Enum):
    """В каком качестве пользователь указан автором записи."""

    FACULTY = "FACULTY"
    STUDENT = "STUDENT"


class ResearchStatus(str, enum.Enum):
    """
    Жизненный цикл публикации. Порядок DRAFT → SUBMITTED → UNDER_REVIEW →
    (REVISION → SUBMITTED) → APPROVED → PUBLISHED задаёт UI, сервер переходы не проверяет.
    """

    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    REVISION = "REVISION"
    APPROVED = "APPROVED"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


class TeacherStatus(str, enum.Enum):
    """Статус записи со стороны проверяющего преподавателя."""

    UPLOADED = "UPLOADED"
    ACCEPTED = "ACCEPTED"
    PUBLISHED = "PUBLISHED"
    UPDATE = "UPDATE"


class JournalScope(str, enum.Enum):
    INTERNATIONAL = "INTERNATIONAL"
    NATIONAL = "NATIONAL"


class JournalReviewType(str, enum.Enum):
    PEER_REVIEWED = "PEER_REVIEWED"
    NON_PEER_REVIEWED = "NON_PEER_REVIEWED"


class JournalAccessType(str, enum.Enum):
    OPEN_ACCESS = "OPEN_ACCESS"
    SUBSCRIPTION = "SUBSCRIPTION"
    HYBRID = "HYBRID"


class JournalIndexing(str, enum.Enum):
    SCOPUS = "SCOPUS"
    WEB_OF_SCIENCE = "WEB_OF_SCIENCE"
    SCI = "SCI"
    UGC_CARE = "UGC_CARE"
    PEER_REVIEWED = "PEER_REVIEWED"
    OTHER = "OTHER"


class JournalQuartile(str, enum.Enum):
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"
    NOT_APPLICABLE = "NOT_APPLICABLE"


class JournalPublicationMode(str, enum.Enum):
    ONLINE = "ONLINE"
    PRINT = "PRINT"
    ONLINE_AND_PRINT = "ONLINE_AND_PRINT"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Допустимые строковые значения перечисления (в порядке объявления)."""
    return [member.value for member in enum_cls]
