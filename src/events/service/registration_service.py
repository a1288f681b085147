"""Registration ledger: capacity-bounded, time-windowed registrations with soft cancellation."""

import typing as t
from uuid import UUID

import structlog
from django.db import transaction

from accounts.models import RollcallUser
from events.exceptions import ConflictError, NotFoundError
from events.models import Event, EventRegistration

from .enums import Messages

logger = structlog.get_logger(__name__)


def get_event(event_id: UUID, *, lock: bool = False) -> Event:
    """Fetch an event or raise NotFoundError.

    With lock=True the row is selected for update; callers must be inside a transaction.
    """
    qs = Event.objects.all()
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=event_id)
    except Event.DoesNotExist:
        raise NotFoundError(Messages.EVENT_NOT_FOUND)


class RegistrationService:
    """Register, cancel, reactivate and count registrations of an event."""

    @transaction.atomic
    def register(
        self, event_id: UUID, user: RollcallUser, answers: dict[str, t.Any] | None = None
    ) -> EventRegistration:
        """Register the user, reactivating a cancelled registration in place.

        Reactivation goes through the same capacity check as a new registration, so
        re-registering can never push the active count above max_participants.

        The event row is locked for the duration of the transaction so that the
        capacity count and the write cannot interleave with another registrant.

        Raises:
            NotFoundError: the event does not exist.
            ConflictError: outside the registration window, already registered, or full.
        """
        event = get_event(event_id, lock=True)
        self._assert_window(event)

        registration = EventRegistration.objects.filter(event=event, user=user).first()
        if registration is not None and registration.is_active:
            raise ConflictError(Messages.ALREADY_REGISTERED)

        self._assert_capacity(event)

        if registration is not None:
            registration.reactivate(answers)
            logger.info(
                "registration_reactivated",
                event_id=str(event.id),
                user_id=str(user.id),
                registration_id=str(registration.id),
            )
            return registration

        registration = EventRegistration.objects.create(event=event, user=user, answers=answers)
        logger.info(
            "registration_created",
            event_id=str(event.id),
            user_id=str(user.id),
            registration_id=str(registration.id),
        )
        return registration

    @transaction.atomic
    def unregister(self, event_id: UUID, user: RollcallUser) -> EventRegistration:
        """Cancel the user's active registration. The row is kept.

        Raises:
            NotFoundError: the event or an active registration does not exist.
        """
        event = get_event(event_id, lock=True)
        registration = (
            EventRegistration.objects.for_event(event.id).active().select_for_update().filter(user=user).first()
        )
        if registration is None:
            raise NotFoundError(Messages.NO_ACTIVE_REGISTRATION)
        registration.cancel()
        logger.info(
            "registration_cancelled",
            event_id=str(event.id),
            user_id=str(user.id),
            registration_id=str(registration.id),
        )
        return registration

    def list_registrations(self, event_id: UUID) -> list[EventRegistration]:
        """All registrations of the event, active and cancelled, in registration order."""
        event = get_event(event_id)
        return list(EventRegistration.objects.for_event(event.id).with_users().order_by("registered_at"))

    def count_active(self, event_id: UUID) -> int:
        """Number of active registrations of the event."""
        return EventRegistration.objects.for_event(event_id).active().count()

    def get_active_registration(self, event_id: UUID, user: RollcallUser) -> EventRegistration | None:
        """The user's active registration, if any."""
        return EventRegistration.objects.for_event(event_id).active().filter(user=user).first()

    @staticmethod
    def _assert_window(event: Event) -> None:
        if event.registration_not_started():
            raise ConflictError(Messages.REGISTRATION_NOT_STARTED)
        if event.registration_ended():
            raise ConflictError(Messages.REGISTRATION_ENDED)

    def _assert_capacity(self, event: Event) -> None:
        if event.max_participants is None:
            return
        if self.count_active(event.id) >= event.max_participants:
            logger.info("registration_rejected_event_full", event_id=str(event.id), capacity=event.max_participants)
            raise ConflictError(Messages.EVENT_FULL)
