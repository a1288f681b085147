"""Event registration, attendance and feedback pipeline.

The single entry point consumed by the API. Every operation resolves the
caller's principal to a user, runs inside its own transaction and returns a
Result instead of raising: NOT_FOUND, UNAUTHORIZED and CONFLICT failures stay
distinguishable for the caller. A failed operation leaves no writes behind.
"""

import datetime
import typing as t
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from pydantic import BaseModel

from accounts.models import RollcallUser
from events.exceptions import PipelineError, UnauthorizedError
from events.models import Event, EventFeedback, EventRegistration

from .attendance_service import AttendanceService, AttendanceStats, EventAttendance
from .enums import Messages
from .event_service import EventDetail, EventService
from .feedback_service import FeedbackEligibility, FeedbackService, FeedbackSummary
from .permissions import StaffPredicate, has_staff_capability, resolve_identity
from .registration_service import RegistrationService
from .results import Err, ErrorKind, Ok, Result

T = t.TypeVar("T")

logger = structlog.get_logger(__name__)

IdentityResolver = t.Callable[[str], RollcallUser | None]


class EventPipeline:
    """Facade over the registration, attendance, feedback and event services.

    Args:
        resolver: maps a principal (the caller email) to an active user, or None.
        is_staff: the single staff-capability predicate shared by every service.
    """

    def __init__(
        self,
        resolver: IdentityResolver = resolve_identity,
        is_staff: StaffPredicate = has_staff_capability,
    ) -> None:
        self.resolver = resolver
        self.registrations = RegistrationService()
        self.attendance = AttendanceService(is_staff=is_staff)
        self.feedback = FeedbackService(is_staff=is_staff)
        self.events = EventService(is_staff=is_staff, registrations=self.registrations)

    def _identity(self, principal: str) -> RollcallUser:
        user = self.resolver(principal)
        if user is None:
            logger.warning("pipeline_identity_unresolved")
            raise UnauthorizedError(Messages.IDENTITY_NOT_RESOLVED)
        return user

    def _run(self, operation: str, func: t.Callable[[], T]) -> Result[T]:
        try:
            with transaction.atomic():
                return Ok(func())
        except PipelineError as exc:
            logger.info("pipeline_operation_failed", operation=operation, kind=exc.kind, detail=exc.message)
            return Err(exc.kind, exc.message)
        except ValidationError as exc:
            message = " ".join(exc.messages)
            logger.info("pipeline_operation_invalid", operation=operation, detail=message)
            return Err(ErrorKind.CONFLICT, message)

    # Events

    def create_event(self, principal: str, payload: BaseModel) -> Result[Event]:
        return self._run("create_event", lambda: self.events.create_event(self._identity(principal), payload))

    def update_event(self, event_id: UUID, principal: str, payload: BaseModel) -> Result[Event]:
        return self._run(
            "update_event", lambda: self.events.update_event(event_id, self._identity(principal), payload)
        )

    def get_event(self, event_id: UUID, principal: str) -> Result[EventDetail]:
        return self._run("get_event", lambda: self.events.get_event_detail(event_id, self._identity(principal)))

    # Registration ledger

    def register(
        self, event_id: UUID, principal: str, answers: dict[str, t.Any] | None = None
    ) -> Result[EventRegistration]:
        return self._run(
            "register", lambda: self.registrations.register(event_id, self._identity(principal), answers)
        )

    def unregister(self, event_id: UUID, principal: str) -> Result[EventRegistration]:
        return self._run("unregister", lambda: self.registrations.unregister(event_id, self._identity(principal)))

    def list_registrations(self, event_id: UUID, principal: str) -> Result[list[EventRegistration]]:
        def run() -> list[EventRegistration]:
            self._identity(principal)
            return self.registrations.list_registrations(event_id)

        return self._run("list_registrations", run)

    # Attendance

    def validate_attendance(
        self,
        event_id: UUID,
        registration_id: UUID,
        status: EventRegistration.AttendanceStatus,
        principal: str,
    ) -> Result[EventRegistration]:
        return self._run(
            "validate_attendance",
            lambda: self.attendance.validate_one(event_id, registration_id, status, self._identity(principal)),
        )

    def validate_attendance_bulk(
        self,
        event_id: UUID,
        items: t.Iterable[tuple[UUID, EventRegistration.AttendanceStatus]],
        principal: str,
    ) -> Result[int]:
        return self._run(
            "validate_attendance_bulk",
            lambda: self.attendance.validate_bulk(event_id, items, self._identity(principal)),
        )

    def reset_attendance(self, event_id: UUID, registration_id: UUID, principal: str) -> Result[bool]:
        return self._run(
            "reset_attendance",
            lambda: self.attendance.reset(event_id, registration_id, self._identity(principal)),
        )

    def attendance_stats(self, event_id: UUID, principal: str) -> Result[AttendanceStats]:
        def run() -> AttendanceStats:
            self._identity(principal)
            return self.attendance.get_stats(event_id)

        return self._run("attendance_stats", run)

    def event_attendance(self, event_id: UUID, principal: str) -> Result[EventAttendance]:
        def run() -> EventAttendance:
            self._identity(principal)
            return self.attendance.get_event_attendance(event_id)

        return self._run("event_attendance", run)

    # Feedback

    def check_feedback_eligibility(self, event_id: UUID, principal: str) -> Result[FeedbackEligibility]:
        return self._run(
            "check_feedback_eligibility",
            lambda: self.feedback.check_eligibility(event_id, self._identity(principal)),
        )

    def submit_feedback(self, event_id: UUID, principal: str, answers: dict[str, t.Any]) -> Result[EventFeedback]:
        return self._run(
            "submit_feedback", lambda: self.feedback.submit(event_id, self._identity(principal), answers)
        )

    def update_feedback(self, event_id: UUID, principal: str, answers: dict[str, t.Any]) -> Result[EventFeedback]:
        return self._run(
            "update_feedback", lambda: self.feedback.update(event_id, self._identity(principal), answers)
        )

    def get_own_feedback(self, event_id: UUID, principal: str) -> Result[EventFeedback | None]:
        return self._run("get_own_feedback", lambda: self.feedback.get_own(event_id, self._identity(principal)))

    def list_feedback(self, event_id: UUID, principal: str) -> Result[list[EventFeedback]]:
        return self._run("list_feedback", lambda: self.feedback.list_all(event_id, self._identity(principal)))

    def feedback_summary(self, event_id: UUID, principal: str) -> Result[FeedbackSummary]:
        return self._run("feedback_summary", lambda: self.feedback.summary(event_id, self._identity(principal)))

    def update_feedback_form(
        self,
        event_id: UUID,
        principal: str,
        feedback_form: dict[str, t.Any] | None,
        feedback_deadline: datetime.datetime | None,
    ) -> Result[Event]:
        return self._run(
            "update_feedback_form",
            lambda: self.feedback.update_feedback_form(
                event_id, self._identity(principal), feedback_form, feedback_deadline
            ),
        )
