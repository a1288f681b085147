import pytest

from accounts.models import RollcallUser
from common.testing import RollcallUserFactory
from events.service.permissions import has_staff_capability, resolve_identity

pytestmark = pytest.mark.django_db


def test_resolve_identity_is_case_insensitive(rollcall_user_factory: RollcallUserFactory) -> None:
    user = rollcall_user_factory(email="Mixed.Case@Example.com")
    assert resolve_identity("mixed.case@example.COM") == user
    assert resolve_identity("  mixed.case@example.com ") == user


def test_resolve_identity_ignores_inactive_and_unknown(rollcall_user_factory: RollcallUserFactory) -> None:
    rollcall_user_factory(email="gone@example.com", is_active=False)
    assert resolve_identity("gone@example.com") is None
    assert resolve_identity("unknown@example.com") is None
    assert resolve_identity("") is None


@pytest.mark.parametrize(
    "flags,expected",
    [
        ({}, False),
        ({"is_staff": True}, False),
        ({"is_event_staff": True}, True),
        ({"is_superuser": True}, True),
        ({"is_event_staff": True, "is_active": False}, False),
    ],
)
def test_staff_capability(rollcall_user_factory: RollcallUserFactory, flags: dict[str, bool], expected: bool) -> None:
    user: RollcallUser = rollcall_user_factory(**flags)
    assert has_staff_capability(user) is expected
