"""Tests for attendance validation."""

from decimal import Decimal
from uuid import uuid4

import pytest
from django.db import connection
from django.test.utils import CaptureQueriesContext
from freezegun import freeze_time

from accounts.models import RollcallUser
from common.testing import RollcallUserFactory
from events.exceptions import ConflictError, NotFoundError, UnauthorizedError
from events.models import Event, EventRegistration
from events.service.attendance_service import AttendanceService, AttendanceStats
from events.service.permissions import has_staff_capability
from events.tests.utils import EventFactory

pytestmark = pytest.mark.django_db

Status = EventRegistration.AttendanceStatus


@pytest.fixture
def service() -> AttendanceService:
    return AttendanceService()


@pytest.fixture
def registrations(event: Event, participants: list[RollcallUser]) -> list[EventRegistration]:
    return [EventRegistration.objects.create(event=event, user=p) for p in participants]


class TestAuthorization:
    def test_non_staff_cannot_validate(
        self, service: AttendanceService, event: Event, registration: EventRegistration, user: RollcallUser
    ) -> None:
        with pytest.raises(UnauthorizedError):
            service.validate_one(event.id, registration.id, Status.PRESENT, user)
        registration.refresh_from_db()
        assert registration.attendance_status == Status.UNVALIDATED

    def test_unauthorized_bulk_touches_nothing(
        self,
        service: AttendanceService,
        event: Event,
        registrations: list[EventRegistration],
        user: RollcallUser,
    ) -> None:
        with CaptureQueriesContext(connection) as ctx:
            with pytest.raises(UnauthorizedError):
                service.validate_bulk(event.id, [(r.id, Status.PRESENT) for r in registrations], user)
        assert len(ctx.captured_queries) == 0
        assert not EventRegistration.objects.exclude(attendance_status=Status.UNVALIDATED).exists()

    def test_non_staff_cannot_reset(
        self, service: AttendanceService, event: Event, registration: EventRegistration, user: RollcallUser
    ) -> None:
        with pytest.raises(UnauthorizedError):
            service.reset(event.id, registration.id, user)

    def test_superuser_carries_capability(
        self,
        service: AttendanceService,
        event: Event,
        registration: EventRegistration,
        superuser: RollcallUser,
    ) -> None:
        updated = service.validate_one(event.id, registration.id, Status.ABSENT, superuser)
        assert updated.attendance_status == Status.ABSENT

    def test_predicate_is_injected(
        self, event: Event, registration: EventRegistration, user: RollcallUser
    ) -> None:
        service = AttendanceService(is_staff=lambda u: u.pk == user.pk)
        updated = service.validate_one(event.id, registration.id, Status.PRESENT, user)
        assert updated.attendance_validated_by == user


class TestValidateOne:
    def test_sets_status_validator_and_timestamp(
        self,
        service: AttendanceService,
        event: Event,
        registration: EventRegistration,
        staff_user: RollcallUser,
    ) -> None:
        with freeze_time("2025-06-02 10:00:00"):
            service.validate_one(event.id, registration.id, Status.PRESENT, staff_user)

        registration.refresh_from_db()
        assert registration.attendance_status == Status.PRESENT
        assert registration.attendance_validated_by == staff_user
        assert registration.attendance_validated_at is not None
        assert registration.attendance_validated_at.isoformat().startswith("2025-06-02T10:00:00")

    def test_registration_of_another_event_is_not_found(
        self,
        service: AttendanceService,
        event: Event,
        event_factory: EventFactory,
        registration: EventRegistration,
        staff_user: RollcallUser,
    ) -> None:
        other = event_factory()
        with pytest.raises(NotFoundError):
            service.validate_one(other.id, registration.id, Status.PRESENT, staff_user)

    def test_unknown_registration_is_not_found(
        self, service: AttendanceService, event: Event, staff_user: RollcallUser
    ) -> None:
        with pytest.raises(NotFoundError):
            service.validate_one(event.id, uuid4(), Status.PRESENT, staff_user)

    def test_cancelled_registration_is_rejected(
        self,
        service: AttendanceService,
        event: Event,
        registration: EventRegistration,
        staff_user: RollcallUser,
    ) -> None:
        registration.cancel()
        with pytest.raises(ConflictError, match="Cannot validate attendance for a cancelled registration."):
            service.validate_one(event.id, registration.id, Status.PRESENT, staff_user)

    def test_unvalidated_is_not_a_validation(
        self,
        service: AttendanceService,
        event: Event,
        registration: EventRegistration,
        staff_user: RollcallUser,
    ) -> None:
        with pytest.raises(ConflictError):
            service.validate_one(event.id, registration.id, Status.UNVALIDATED, staff_user)


class TestValidateBulk:
    def test_updates_only_resolvable_registrations(
        self,
        service: AttendanceService,
        event: Event,
        event_factory: EventFactory,
        registrations: list[EventRegistration],
        staff_user: RollcallUser,
    ) -> None:
        cancelled = registrations[4]
        cancelled.cancel()
        foreign = EventRegistration.objects.create(event=event_factory(), user=staff_user)
        items = [
            (registrations[0].id, Status.PRESENT),
            (registrations[1].id, Status.ABSENT),
            (registrations[2].id, Status.EXCUSED),
            (uuid4(), Status.PRESENT),
            (cancelled.id, Status.PRESENT),
            (foreign.id, Status.PRESENT),
        ]

        count = service.validate_bulk(event.id, items, staff_user)

        assert count == 3
        statuses = dict(EventRegistration.objects.values_list("id", "attendance_status"))
        assert statuses[registrations[0].id] == Status.PRESENT
        assert statuses[registrations[1].id] == Status.ABSENT
        assert statuses[registrations[2].id] == Status.EXCUSED
        assert statuses[registrations[3].id] == Status.UNVALIDATED
        assert statuses[cancelled.id] == Status.UNVALIDATED
        assert statuses[foreign.id] == Status.UNVALIDATED

    def test_registrations_are_resolved_in_a_single_lookup(
        self,
        service: AttendanceService,
        event: Event,
        registrations: list[EventRegistration],
        staff_user: RollcallUser,
    ) -> None:
        items = [(r.id, Status.PRESENT) for r in registrations] + [(uuid4(), Status.ABSENT) for _ in range(20)]

        with CaptureQueriesContext(connection) as ctx:
            count = service.validate_bulk(event.id, items, staff_user)

        registration_selects = [
            q["sql"]
            for q in ctx.captured_queries
            if q["sql"].lstrip().upper().startswith("SELECT") and "events_eventregistration" in q["sql"]
        ]
        assert count == len(registrations)
        assert len(registration_selects) == 1

    def test_duplicate_ids_last_status_wins_and_count_once(
        self,
        service: AttendanceService,
        event: Event,
        registration: EventRegistration,
        staff_user: RollcallUser,
    ) -> None:
        items = [(registration.id, Status.ABSENT), (registration.id, Status.PRESENT)]

        assert service.validate_bulk(event.id, items, staff_user) == 1
        registration.refresh_from_db()
        assert registration.attendance_status == Status.PRESENT
        assert registration.attendance_validated_by == staff_user
        assert registration.attendance_validated_at is not None

    def test_empty_batch_updates_nothing(
        self, service: AttendanceService, event: Event, staff_user: RollcallUser
    ) -> None:
        assert service.validate_bulk(event.id, [], staff_user) == 0

    def test_failed_write_rolls_back_whole_batch(
        self,
        service: AttendanceService,
        event: Event,
        registrations: list[EventRegistration],
        staff_user: RollcallUser,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        def broken_bulk_update(*args: object, **kwargs: object) -> int:
            EventRegistration.objects.filter(pk=registrations[0].pk).update(attendance_status=Status.PRESENT)
            raise RuntimeError("database went away")

        monkeypatch.setattr(EventRegistration.objects, "bulk_update", broken_bulk_update)

        with pytest.raises(RuntimeError):
            service.validate_bulk(event.id, [(r.id, Status.PRESENT) for r in registrations], staff_user)

        assert not EventRegistration.objects.filter(attendance_status=Status.PRESENT).exists()

    def test_missing_event_is_not_found(self, service: AttendanceService, staff_user: RollcallUser) -> None:
        with pytest.raises(NotFoundError):
            service.validate_bulk(uuid4(), [(uuid4(), Status.PRESENT)], staff_user)


class TestReset:
    def test_reset_clears_attendance(
        self,
        service: AttendanceService,
        event: Event,
        present_registration: EventRegistration,
        staff_user: RollcallUser,
    ) -> None:
        assert service.reset(event.id, present_registration.id, staff_user) is True

        present_registration.refresh_from_db()
        assert present_registration.attendance_status == Status.UNVALIDATED
        assert present_registration.attendance_validated_by is None
        assert present_registration.attendance_validated_at is None

    def test_reset_missing_registration_returns_false(
        self, service: AttendanceService, event: Event, staff_user: RollcallUser
    ) -> None:
        assert service.reset(event.id, uuid4(), staff_user) is False

    def test_reset_foreign_registration_returns_false(
        self,
        service: AttendanceService,
        event_factory: EventFactory,
        present_registration: EventRegistration,
        staff_user: RollcallUser,
    ) -> None:
        other = event_factory()
        assert service.reset(other.id, present_registration.id, staff_user) is False
        present_registration.refresh_from_db()
        assert present_registration.attendance_status == Status.PRESENT


class TestStats:
    def test_worked_example(
        self,
        service: AttendanceService,
        event: Event,
        rollcall_user_factory: RollcallUserFactory,
        staff_user: RollcallUser,
    ) -> None:
        layout = [Status.PRESENT] * 5 + [Status.ABSENT] * 2 + [Status.EXCUSED] + [Status.UNVALIDATED] * 2
        for status in layout:
            reg = EventRegistration.objects.create(event=event, user=rollcall_user_factory())
            if status != Status.UNVALIDATED:
                reg.apply_attendance(status, staff_user)
                reg.save()

        stats = service.get_stats(event.id)

        assert stats.total_registered == 10
        assert stats.total_validated == 8
        assert (stats.present, stats.absent, stats.excused, stats.not_validated) == (5, 2, 1, 2)
        assert stats.attendance_rate == Decimal("62.50")
        assert stats.validation_rate == Decimal("80.00")

    def test_missing_buckets_count_as_zero(self, service: AttendanceService, event: Event) -> None:
        stats = service.get_stats(event.id)

        assert stats.total_registered == 0
        assert stats.present == stats.absent == stats.excused == stats.not_validated == 0
        assert stats.attendance_rate == Decimal("0.00")
        assert stats.validation_rate == Decimal("0.00")

    def test_cancelled_registrations_are_not_counted(
        self, service: AttendanceService, event: Event, registrations: list[EventRegistration]
    ) -> None:
        registrations[0].cancel()
        assert service.get_stats(event.id).total_registered == len(registrations) - 1

    def test_rates_round_half_up(self) -> None:
        stats = AttendanceStats(event_id=uuid4(), total_registered=3, present=1, absent=0, excused=2, not_validated=0)
        assert stats.attendance_rate == Decimal("33.33")
        stats = AttendanceStats(event_id=uuid4(), total_registered=3, present=2, absent=1, excused=0, not_validated=0)
        assert stats.attendance_rate == Decimal("66.67")
        stats = AttendanceStats(event_id=uuid4(), total_registered=8, present=1, absent=0, excused=0, not_validated=7)
        assert stats.validation_rate == Decimal("12.50")

    def test_stats_missing_event_is_not_found(self, service: AttendanceService) -> None:
        with pytest.raises(NotFoundError):
            service.get_stats(uuid4())

    def test_event_attendance_overview(
        self,
        service: AttendanceService,
        event: Event,
        registrations: list[EventRegistration],
        staff_user: RollcallUser,
    ) -> None:
        service.validate_one(event.id, registrations[0].id, Status.PRESENT, staff_user)
        registrations[1].cancel()

        overview = service.get_event_attendance(event.id)

        assert overview.event == event
        assert len(overview.registrations) == len(registrations) - 1
        assert overview.stats.present == 1


def test_default_predicate_is_the_staff_capability() -> None:
    assert AttendanceService().is_staff is has_staff_capability
