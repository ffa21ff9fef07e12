"""Базовая видимость записей в зависимости от вызывающего."""
import enum

from app.modules.auth.caller import Caller
from app.modules.research.enums import AuthorCapacity, UserRole
from app.modules.research.predicate import TRUE, AuthoredBy, Eq, Predicate, or_


class ScopePolicy(str, enum.Enum):
    """
    PUBLIC_OR_AUTHORED: публичные записи или записи, где вызывающий автор.
    AUTHORED_ONLY: для не-админа только записи, где он автор (список и экспорт журналов).
    """

    PUBLIC_OR_AUTHORED = "PUBLIC_OR_AUTHORED"
    AUTHORED_ONLY = "AUTHORED_ONLY"


_CAPACITY_BY_ROLE = {
    UserRole.FACULTY: AuthorCapacity.FACULTY,
    UserRole.STUDENT: AuthorCapacity.STUDENT,
}


def resolve_scope(caller: Caller | None, policy: ScopePolicy) -> Predicate:
    """
    Предикат видимости: аноним видит только публичное, ADMIN всё,
    FACULTY/STUDENT по политике, авторство проверяется в роли вызывающего.
    """
    if caller is None:
        return Eq("is_public", True)
    if caller.is_admin:
        return TRUE
    authored = AuthoredBy(_CAPACITY_BY_ROLE[caller.role], (caller.id,))
    if policy == ScopePolicy.AUTHORED_ONLY:
        return authored
    return or_(Eq("is_public", True), authored)
