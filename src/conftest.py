"""Shared fixtures for the rollcall test-suite."""

from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone

from accounts.models import RollcallUser
from common.testing import RollcallUserFactory
from events.models import Event


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    """Clear the cache before each test so throttle history does not leak between tests.

    Throttle rates are parsed when the throttles are instantiated at import time, so
    each test starts from an empty request history instead of a patched rate.
    """
    cache.clear()


@pytest.fixture
def rollcall_user_factory() -> RollcallUserFactory:
    return RollcallUserFactory()


@pytest.fixture
def user(rollcall_user_factory: RollcallUserFactory) -> RollcallUser:
    """A plain participant."""
    return rollcall_user_factory()


@pytest.fixture
def staff_user(rollcall_user_factory: RollcallUserFactory) -> RollcallUser:
    """A member of the event staff."""
    return rollcall_user_factory(is_event_staff=True)


@pytest.fixture
def superuser(rollcall_user_factory: RollcallUserFactory) -> RollcallUser:
    """A superuser."""
    return rollcall_user_factory(is_superuser=True, is_staff=True)


@pytest.fixture
def organizer(rollcall_user_factory: RollcallUserFactory) -> RollcallUser:
    """The creator of the default event."""
    return rollcall_user_factory()


@pytest.fixture
def event(organizer: RollcallUser) -> Event:
    """An event whose registration window is currently open, with a feedback form."""
    now = timezone.now()
    return Event.objects.create(
        title="Community Meetup",
        description="Monthly meetup",
        location="Town hall",
        start=now - timedelta(days=1),
        end=now + timedelta(days=7),
        feedback_form={"questions": [{"id": "rating", "type": "scale", "min": 1, "max": 5}]},
        created_by=organizer,
    )
