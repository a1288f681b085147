"""Attendance validation on top of active registrations.

Mutations require the event-staff capability. The capability check happens
once, up front, before any row is read or written.
"""

import typing as t
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import Count

from accounts.models import RollcallUser
from events.exceptions import ConflictError, NotFoundError, UnauthorizedError
from events.models import Event, EventRegistration
from events.utils import percentage

from .enums import Messages
from .permissions import StaffPredicate, has_staff_capability
from .registration_service import get_event

logger = structlog.get_logger(__name__)

AttendanceStatus = EventRegistration.AttendanceStatus

ATTENDANCE_FIELDS = ["attendance_status", "attendance_validated_by", "attendance_validated_at", "updated_at"]


@dataclass(frozen=True)
class AttendanceStats:
    """Attendance counts over the active registrations of an event. Rates are percentages."""

    event_id: UUID
    total_registered: int
    present: int
    absent: int
    excused: int
    not_validated: int

    @property
    def total_validated(self) -> int:
        return self.present + self.absent + self.excused

    @property
    def attendance_rate(self) -> Decimal:
        """Share of validated participants that were present."""
        return percentage(self.present, self.total_validated)

    @property
    def validation_rate(self) -> Decimal:
        """Share of registered participants whose attendance has been validated."""
        return percentage(self.total_validated, self.total_registered)


@dataclass(frozen=True)
class EventAttendance:
    event: Event
    registrations: list[EventRegistration]
    stats: AttendanceStats


class AttendanceService:
    def __init__(self, is_staff: StaffPredicate = has_staff_capability) -> None:
        self.is_staff = is_staff

    def _authorize(self, validator: RollcallUser) -> None:
        if not self.is_staff(validator):
            logger.warning("attendance_validation_forbidden", user_id=str(validator.id))
            raise UnauthorizedError(Messages.STAFF_REQUIRED)

    @transaction.atomic
    def validate_one(
        self,
        event_id: UUID,
        registration_id: UUID,
        status: EventRegistration.AttendanceStatus,
        validator: RollcallUser,
    ) -> EventRegistration:
        """Record the attendance of one active registration.

        Raises:
            UnauthorizedError: the validator lacks the event-staff capability.
            NotFoundError: the event is missing, or the registration is missing or belongs to another event.
            ConflictError: the registration is cancelled, or the status is unvalidated.
        """
        self._authorize(validator)
        if status == AttendanceStatus.UNVALIDATED:
            raise ConflictError(Messages.UNVALIDATED_NOT_ALLOWED)
        event = get_event(event_id)
        registration = (
            EventRegistration.objects.for_event(event.id).select_for_update().filter(pk=registration_id).first()
        )
        if registration is None:
            raise NotFoundError(Messages.REGISTRATION_NOT_FOUND)
        if not registration.is_active:
            raise ConflictError(Messages.CANCELLED_REGISTRATION)

        registration.apply_attendance(status, validator)
        registration.save(update_fields=ATTENDANCE_FIELDS)
        logger.info(
            "attendance_validated",
            event_id=str(event.id),
            registration_id=str(registration.id),
            status=status,
            validator_id=str(validator.id),
        )
        return registration

    def validate_bulk(
        self,
        event_id: UUID,
        items: t.Iterable[tuple[UUID, EventRegistration.AttendanceStatus]],
        validator: RollcallUser,
    ) -> int:
        """Record attendance for many registrations at once.

        All referenced ids are resolved with a single lookup restricted to the
        event's active registrations. Unknown, foreign and cancelled ids are
        skipped. When an id appears more than once the last status wins.
        Every touched row is written in one transaction.

        Returns:
            The number of registrations updated.
        """
        self._authorize(validator)
        event = get_event(event_id)

        wanted: dict[UUID, EventRegistration.AttendanceStatus] = {}
        for registration_id, status in items:
            if status == AttendanceStatus.UNVALIDATED:
                continue
            wanted[registration_id] = status
        if not wanted:
            return 0

        try:
            with transaction.atomic():
                registrations = (
                    EventRegistration.objects.for_event(event.id).active().select_for_update().in_bulk(list(wanted))
                )
                for registration_id, registration in registrations.items():
                    registration.apply_attendance(wanted[registration_id], validator)
                EventRegistration.objects.bulk_update(list(registrations.values()), ATTENDANCE_FIELDS)
        except Exception:
            logger.exception("attendance_bulk_validation_failed", event_id=str(event.id))
            raise

        logger.info(
            "attendance_bulk_validated",
            event_id=str(event.id),
            requested=len(wanted),
            updated=len(registrations),
            validator_id=str(validator.id),
        )
        return len(registrations)

    @transaction.atomic
    def reset(self, event_id: UUID, registration_id: UUID, validator: RollcallUser) -> bool:
        """Clear the attendance of a registration.

        Returns False when the registration does not exist or belongs to another event.
        """
        self._authorize(validator)
        event = get_event(event_id)
        registration = (
            EventRegistration.objects.for_event(event.id).select_for_update().filter(pk=registration_id).first()
        )
        if registration is None:
            logger.info("attendance_reset_skipped", event_id=str(event.id), registration_id=str(registration_id))
            return False
        registration.clear_attendance()
        registration.save(update_fields=ATTENDANCE_FIELDS)
        logger.info(
            "attendance_reset",
            event_id=str(event.id),
            registration_id=str(registration.id),
            validator_id=str(validator.id),
        )
        return True

    def get_stats(self, event_id: UUID) -> AttendanceStats:
        """Attendance counts over the event's active registrations, from a single grouped query."""
        event = get_event(event_id)
        buckets = dict(
            EventRegistration.objects.for_event(event.id)
            .active()
            .order_by()
            .values("attendance_status")
            .annotate(total=Count("id"))
            .values_list("attendance_status", "total")
        )
        present = buckets.get(AttendanceStatus.PRESENT, 0)
        absent = buckets.get(AttendanceStatus.ABSENT, 0)
        excused = buckets.get(AttendanceStatus.EXCUSED, 0)
        not_validated = buckets.get(AttendanceStatus.UNVALIDATED, 0)
        return AttendanceStats(
            event_id=event.id,
            total_registered=present + absent + excused + not_validated,
            present=present,
            absent=absent,
            excused=excused,
            not_validated=not_validated,
        )

    def get_event_attendance(self, event_id: UUID) -> EventAttendance:
        """The event, its active registrations with attendance, and the derived statistics."""
        event = get_event(event_id)
        registrations = list(
            EventRegistration.objects.for_event(event.id).active().with_users().order_by("registered_at")
        )
        return EventAttendance(event=event, registrations=registrations, stats=self.get_stats(event.id))
