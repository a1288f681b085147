import pytest
from django.test.client import Client
from ninja_jwt.tokens import RefreshToken

from accounts.models import RollcallUser


def auth_client(user: RollcallUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")  # type: ignore[attr-defined]


@pytest.fixture
def user_client(user: RollcallUser) -> Client:
    """API client for a plain participant."""
    return auth_client(user)


@pytest.fixture
def staff_client(staff_user: RollcallUser) -> Client:
    """API client for an event staff member."""
    return auth_client(staff_user)


@pytest.fixture
def organizer_client(organizer: RollcallUser) -> Client:
    """API client for the creator of the default event."""
    return auth_client(organizer)
