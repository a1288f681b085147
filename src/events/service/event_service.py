from dataclasses import dataclass
from uuid import UUID

import structlog
from django.db import transaction
from pydantic import BaseModel

from accounts.models import RollcallUser
from events.exceptions import NotFoundError, UnauthorizedError
from events.models import Event, EventRegistration

from . import update_db_instance
from .enums import Messages
from .permissions import StaffPredicate, has_staff_capability
from .registration_service import RegistrationService, get_event

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EventDetail:
    event: Event
    registered_count: int
    my_registration: EventRegistration | None

    @property
    def is_registered(self) -> bool:
        return self.my_registration is not None

    @property
    def is_full(self) -> bool:
        return self.event.max_participants is not None and self.registered_count >= self.event.max_participants


class EventService:
    def __init__(
        self,
        is_staff: StaffPredicate = has_staff_capability,
        registrations: RegistrationService | None = None,
    ) -> None:
        self.is_staff = is_staff
        self.registrations = registrations or RegistrationService()

    def can_manage(self, event: Event, user: RollcallUser) -> bool:
        """Creator or event staff."""
        return event.created_by_id == user.id or self.is_staff(user)

    @transaction.atomic
    def create_event(self, creator: RollcallUser, payload: BaseModel) -> Event:
        """Create an event owned by the creator."""
        event = Event.objects.create(created_by=creator, **payload.model_dump())
        logger.info("event_created", event_id=str(event.id), user_id=str(creator.id))
        return event

    def update_event(self, event_id: UUID, caller: RollcallUser, payload: BaseModel) -> Event:
        """Apply the fields set in the payload. Creator or staff only."""
        event = get_event(event_id)
        if not self.can_manage(event, caller):
            logger.warning("event_update_forbidden", event_id=str(event.id), user_id=str(caller.id))
            raise UnauthorizedError(Messages.ORGANIZER_REQUIRED)
        event = update_db_instance(event, payload)
        logger.info("event_updated", event_id=str(event.id), user_id=str(caller.id))
        return event

    def get_event_detail(self, event_id: UUID, caller: RollcallUser) -> EventDetail:
        """The event with its active registration count and the caller's own registration."""
        event = Event.objects.with_creator().with_registered_count().filter(pk=event_id).first()
        if event is None:
            raise NotFoundError(Messages.EVENT_NOT_FOUND)
        return EventDetail(
            event=event,
            registered_count=event.registered_count,  # type: ignore[attr-defined]
            my_registration=self.registrations.get_active_registration(event.id, caller),
        )
