"""Feedback eligibility engine.

Feedback is gated, in order, by the event having a feedback form, by the
participant's attendance having been validated as present, and by the
feedback deadline. Submission and update share the same gate; only the
mutating operations tell create and update apart.
"""

import datetime
import typing as t
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction

from accounts.models import RollcallUser
from events.exceptions import ConflictError, NotFoundError, UnauthorizedError
from events.models import Event, EventFeedback, EventRegistration
from events.utils import percentage

from .enums import EligibilityReason, Messages
from .permissions import StaffPredicate, has_staff_capability
from .registration_service import get_event

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FeedbackEligibility:
    event_id: UUID
    can_submit: bool
    reason: EligibilityReason | None = None
    has_submitted: bool = False
    existing_feedback: EventFeedback | None = None
    feedback_form: dict[str, t.Any] | None = None
    deadline: datetime.datetime | None = None


@dataclass(frozen=True)
class FeedbackSummary:
    event_id: UUID
    event_title: str
    total_attendees: int
    total_feedbacks: int
    deadline: datetime.datetime | None
    has_feedback_form: bool

    @property
    def response_rate(self) -> Decimal:
        return percentage(self.total_feedbacks, self.total_attendees)


class FeedbackService:
    def __init__(self, is_staff: StaffPredicate = has_staff_capability) -> None:
        self.is_staff = is_staff

    def _authorize(self, user: RollcallUser) -> None:
        if not self.is_staff(user):
            logger.warning("feedback_administration_forbidden", user_id=str(user.id))
            raise UnauthorizedError(Messages.STAFF_REQUIRED)

    def check_eligibility(self, event_id: UUID, user: RollcallUser) -> FeedbackEligibility:
        """Decide whether the user may submit or edit feedback for the event.

        The first blocking condition wins: no feedback form, attendance not
        confirmed as present (a missing registration counts the same), then
        deadline passed. Once attendance is confirmed the descriptor always
        reports whether a response already exists.
        """
        event = get_event(event_id)
        if not event.has_feedback_form:
            return FeedbackEligibility(
                event_id=event.id,
                can_submit=False,
                reason=EligibilityReason.NO_FEEDBACK_FORM,
                deadline=event.feedback_deadline,
            )

        attended = EventRegistration.objects.for_event(event.id).present().filter(user=user).exists()
        if not attended:
            return FeedbackEligibility(
                event_id=event.id,
                can_submit=False,
                reason=EligibilityReason.NOT_ATTENDED,
                deadline=event.feedback_deadline,
            )

        existing = EventFeedback.objects.filter(event=event, user=user).first()
        if event.is_feedback_deadline_passed():
            return FeedbackEligibility(
                event_id=event.id,
                can_submit=False,
                reason=EligibilityReason.DEADLINE_PASSED,
                has_submitted=existing is not None,
                existing_feedback=existing,
                deadline=event.feedback_deadline,
            )

        return FeedbackEligibility(
            event_id=event.id,
            can_submit=True,
            has_submitted=existing is not None,
            existing_feedback=existing,
            feedback_form=event.feedback_form,
            deadline=event.feedback_deadline,
        )

    @transaction.atomic
    def submit(self, event_id: UUID, user: RollcallUser, answers: dict[str, t.Any]) -> EventFeedback:
        """Create the user's feedback response.

        Raises:
            NotFoundError: the event does not exist.
            ConflictError: the user is ineligible or has already submitted.
        """
        eligibility = self.check_eligibility(event_id, user)
        if not eligibility.can_submit:
            logger.info(
                "feedback_rejected_ineligible",
                event_id=str(event_id),
                user_id=str(user.id),
                reason=eligibility.reason,
            )
            raise ConflictError(Messages.FEEDBACK_INELIGIBLE.format(reason=eligibility.reason))
        if eligibility.has_submitted:
            raise ConflictError(Messages.FEEDBACK_ALREADY_SUBMITTED)

        try:
            with transaction.atomic():
                feedback = EventFeedback.objects.create(event_id=event_id, user=user, answers=answers)
        except IntegrityError:
            logger.warning("feedback_submit_race", event_id=str(event_id), user_id=str(user.id))
            raise ConflictError(Messages.FEEDBACK_ALREADY_SUBMITTED)

        logger.info("feedback_submitted", event_id=str(event_id), user_id=str(user.id), feedback_id=str(feedback.id))
        return feedback

    @transaction.atomic
    def update(self, event_id: UUID, user: RollcallUser, answers: dict[str, t.Any]) -> EventFeedback:
        """Overwrite the user's feedback response.

        Only the deadline is re-checked: attendance cannot be revoked once feedback exists.
        The deadline is checked before the response is looked up.

        Raises:
            NotFoundError: the event or the response does not exist.
            ConflictError: the deadline has passed.
        """
        event = get_event(event_id)
        if event.is_feedback_deadline_passed():
            raise ConflictError(Messages.FEEDBACK_DEADLINE_PASSED)
        feedback = EventFeedback.objects.select_for_update().filter(event=event, user=user).first()
        if feedback is None:
            raise NotFoundError(Messages.FEEDBACK_NOT_FOUND)
        feedback.edit(answers)
        logger.info("feedback_updated", event_id=str(event.id), user_id=str(user.id), feedback_id=str(feedback.id))
        return feedback

    def get_own(self, event_id: UUID, user: RollcallUser) -> EventFeedback | None:
        """The user's own response, if any."""
        event = get_event(event_id)
        return EventFeedback.objects.with_user().filter(event=event, user=user).first()

    def list_all(self, event_id: UUID, staff: RollcallUser) -> list[EventFeedback]:
        """Every response of the event. Staff only."""
        self._authorize(staff)
        event = get_event(event_id)
        return list(EventFeedback.objects.with_user().filter(event=event).order_by("submitted_at"))

    def summary(self, event_id: UUID, staff: RollcallUser) -> FeedbackSummary:
        """Response rate over the event's confirmed attendees. Staff only."""
        self._authorize(staff)
        event = get_event(event_id)
        attendees = EventRegistration.objects.for_event(event.id).active().present().count()
        feedbacks = EventFeedback.objects.filter(event=event).count()
        return FeedbackSummary(
            event_id=event.id,
            event_title=event.title,
            total_attendees=attendees,
            total_feedbacks=feedbacks,
            deadline=event.feedback_deadline,
            has_feedback_form=event.has_feedback_form,
        )

    @transaction.atomic
    def update_feedback_form(
        self,
        event_id: UUID,
        staff: RollcallUser,
        feedback_form: dict[str, t.Any] | None,
        feedback_deadline: datetime.datetime | None,
    ) -> Event:
        """Replace the event's feedback form and deadline. Staff only."""
        self._authorize(staff)
        event = get_event(event_id, lock=True)
        event.feedback_form = feedback_form
        event.feedback_deadline = feedback_deadline
        event.save(update_fields=["feedback_form", "feedback_deadline", "updated_at"])
        logger.info("feedback_form_updated", event_id=str(event.id), staff_id=str(staff.id))
        return event
