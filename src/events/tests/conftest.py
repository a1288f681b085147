import typing as t
from datetime import timedelta

import pytest

from accounts.models import RollcallUser
from common.testing import RollcallUserFactory
from events.models import Event, EventRegistration
from events.tests.utils import T0, EventFactory


@pytest.fixture
def event_factory(organizer: RollcallUser) -> EventFactory:
    """Create events anchored at T0 with a one-week registration window."""

    def _create(**kwargs: t.Any) -> Event:
        kwargs.setdefault("title", "Anchored event")
        kwargs.setdefault("start", T0)
        kwargs.setdefault("end", T0 + timedelta(days=7))
        kwargs.setdefault("created_by", organizer)
        return Event.objects.create(**kwargs)

    return _create


@pytest.fixture
def participants(rollcall_user_factory: RollcallUserFactory) -> list[RollcallUser]:
    return [rollcall_user_factory() for _ in range(5)]


@pytest.fixture
def registration(event: Event, user: RollcallUser) -> EventRegistration:
    """An active registration of the default user to the default event."""
    return EventRegistration.objects.create(event=event, user=user)


@pytest.fixture
def present_registration(event: Event, user: RollcallUser, staff_user: RollcallUser) -> EventRegistration:
    """An active registration whose attendance was validated as present."""
    reg = EventRegistration.objects.create(event=event, user=user)
    reg.apply_attendance(EventRegistration.AttendanceStatus.PRESENT, staff_user)
    reg.save()
    return reg
