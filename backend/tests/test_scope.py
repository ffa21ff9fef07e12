import pytest

from app.modules.auth.caller import Caller
from app.modules.research.enums import AuthorCapacity, UserRole
from app.modules.research.predicate import TRUE, AuthoredBy, Eq, Or
from app.modules.research.scope import ScopePolicy, resolve_scope


@pytest.mark.parametrize("policy", list(ScopePolicy))
def test_anonymous_sees_only_public(policy: ScopePolicy) -> None:
    assert resolve_scope(None, policy) == Eq("is_public", True)


@pytest.mark.parametrize("policy", list(ScopePolicy))
def test_admin_sees_everything(policy: ScopePolicy) -> None:
    assert resolve_scope(Caller(id="a1", role=UserRole.ADMIN), policy) is TRUE


def test_public_or_authored_uses_caller_capacity() -> None:
    student = Caller(id="s1", role=UserRole.STUDENT)
    assert resolve_scope(student, ScopePolicy.PUBLIC_OR_AUTHORED) == Or(
        (Eq("is_public", True), AuthoredBy(AuthorCapacity.STUDENT, ("s1",)))
    )


def test_authored_only_ignores_public_flag() -> None:
    faculty = Caller(id="f1", role=UserRole.FACULTY)
    assert resolve_scope(faculty, ScopePolicy.AUTHORED_ONLY) == AuthoredBy(
        AuthorCapacity.FACULTY, ("f1",)
    )
