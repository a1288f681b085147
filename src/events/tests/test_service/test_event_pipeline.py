"""Tests for the event pipeline entry point."""

from datetime import timedelta
from uuid import uuid4

import pytest
from freezegun import freeze_time

from accounts.models import RollcallUser
from common.testing import RollcallUserFactory
from events.exceptions import PipelineError
from events.models import Event, EventFeedback, EventRegistration
from events.service.enums import EligibilityReason
from events.service.pipeline import EventPipeline
from events.service.results import Err, ErrorKind, Ok
from events.tests.utils import FEEDBACK_FORM, T0, EventFactory

pytestmark = pytest.mark.django_db

Status = EventRegistration.AttendanceStatus


@pytest.fixture
def pipeline() -> EventPipeline:
    return EventPipeline()


class TestIdentity:
    def test_unknown_principal_is_unauthorized(self, pipeline: EventPipeline, event: Event) -> None:
        result = pipeline.register(event.id, "nobody@example.com")

        assert isinstance(result, Err)
        assert result.kind == ErrorKind.UNAUTHORIZED
        assert not EventRegistration.objects.exists()

    def test_principal_is_matched_case_insensitively(
        self, pipeline: EventPipeline, event: Event, user: RollcallUser
    ) -> None:
        result = pipeline.register(event.id, user.email.upper())

        assert isinstance(result, Ok)
        assert result.value.user == user

    def test_inactive_user_is_unauthorized(
        self, pipeline: EventPipeline, event: Event, rollcall_user_factory: RollcallUserFactory
    ) -> None:
        inactive = rollcall_user_factory(is_active=False)
        result = pipeline.register(event.id, inactive.email)
        assert isinstance(result, Err)
        assert result.kind == ErrorKind.UNAUTHORIZED

    def test_custom_resolver(self, event: Event, user: RollcallUser) -> None:
        pipeline = EventPipeline(resolver=lambda principal: user if principal == "token-subject" else None)
        assert pipeline.register(event.id, "token-subject").is_ok
        assert not pipeline.register(event.id, user.email).is_ok


class TestErrorKinds:
    def test_kinds_are_distinguishable(
        self, pipeline: EventPipeline, event: Event, registration: EventRegistration, user: RollcallUser
    ) -> None:
        not_found = pipeline.register(uuid4(), user.email)
        unauthorized = pipeline.validate_attendance(event.id, registration.id, Status.PRESENT, user.email)
        conflict = pipeline.register(event.id, user.email)

        assert isinstance(not_found, Err) and not_found.kind == ErrorKind.NOT_FOUND
        assert isinstance(unauthorized, Err) and unauthorized.kind == ErrorKind.UNAUTHORIZED
        assert isinstance(conflict, Err) and conflict.kind == ErrorKind.CONFLICT
        assert conflict.message == "Already registered for this event."

    def test_unwrap_raises_pipeline_error(self, pipeline: EventPipeline, user: RollcallUser) -> None:
        result = pipeline.unregister(uuid4(), user.email)

        with pytest.raises(PipelineError) as exc_info:
            result.unwrap()
        assert exc_info.value.kind == ErrorKind.NOT_FOUND

    def test_ok_unwraps_to_value(self, pipeline: EventPipeline, event: Event, user: RollcallUser) -> None:
        registration = pipeline.register(event.id, user.email).unwrap()
        assert registration.event_id == event.id

    def test_model_validation_becomes_conflict(
        self, pipeline: EventPipeline, present_registration: EventRegistration, user: RollcallUser
    ) -> None:
        event = present_registration.event

        result = pipeline.submit_feedback(event.id, user.email, {})

        assert isinstance(result, Err) and result.kind == ErrorKind.CONFLICT
        assert "blank" in result.message
        assert not EventFeedback.objects.exists()

    def test_empty_answers_on_update_leave_feedback_untouched(
        self, pipeline: EventPipeline, present_registration: EventRegistration, user: RollcallUser
    ) -> None:
        event = present_registration.event
        pipeline.submit_feedback(event.id, user.email, {"rating": 5}).unwrap()

        result = pipeline.update_feedback(event.id, user.email, {})

        assert isinstance(result, Err) and result.kind == ErrorKind.CONFLICT
        feedback = EventFeedback.objects.get()
        assert feedback.answers == {"rating": 5}
        assert feedback.edited_at is None

    def test_end_before_stored_start_is_conflict(
        self, pipeline: EventPipeline, event: Event, organizer: RollcallUser
    ) -> None:
        from events.schema import EventEditSchema

        payload = EventEditSchema(end=event.start - timedelta(days=1))

        result = pipeline.update_event(event.id, organizer.email, payload)

        assert isinstance(result, Err) and result.kind == ErrorKind.CONFLICT
        assert result.message == "End date must be after start date."
        event.refresh_from_db()
        assert event.end is not None and event.end > event.start


class TestEndToEnd:
    def test_registration_attendance_feedback_flow(
        self,
        pipeline: EventPipeline,
        event_factory: EventFactory,
        user: RollcallUser,
        staff_user: RollcallUser,
    ) -> None:
        event = event_factory(feedback_form=FEEDBACK_FORM, feedback_deadline=T0 + timedelta(days=10))

        with freeze_time(T0 + timedelta(hours=1)):
            registration = pipeline.register(event.id, user.email, {"diet": "none"}).unwrap()
            assert (
                pipeline.check_feedback_eligibility(event.id, user.email).unwrap().reason
                == EligibilityReason.NOT_ATTENDED
            )

        with freeze_time(T0 + timedelta(days=8)):
            pipeline.validate_attendance(event.id, registration.id, Status.PRESENT, staff_user.email).unwrap()
            assert pipeline.check_feedback_eligibility(event.id, user.email).unwrap().can_submit
            pipeline.submit_feedback(event.id, user.email, {"rating": 5}).unwrap()
            pipeline.update_feedback(event.id, user.email, {"rating": 4}).unwrap()

        with freeze_time(T0 + timedelta(days=11)):
            eligibility = pipeline.check_feedback_eligibility(event.id, user.email).unwrap()
            assert eligibility.reason == EligibilityReason.DEADLINE_PASSED
            assert eligibility.has_submitted is True

            late = pipeline.submit_feedback(event.id, user.email, {"rating": 1})
            assert isinstance(late, Err) and late.kind == ErrorKind.CONFLICT

        summary = pipeline.feedback_summary(event.id, staff_user.email).unwrap()
        assert summary.total_feedbacks == 1
        assert EventFeedback.objects.get().answers == {"rating": 4}

    def test_bulk_and_stats(
        self,
        pipeline: EventPipeline,
        event: Event,
        participants: list[RollcallUser],
        staff_user: RollcallUser,
    ) -> None:
        registrations = [pipeline.register(event.id, p.email).unwrap() for p in participants]
        items = [(registrations[0].id, Status.PRESENT), (registrations[1].id, Status.ABSENT), (uuid4(), Status.PRESENT)]

        assert pipeline.validate_attendance_bulk(event.id, items, staff_user.email).unwrap() == 2
        stats = pipeline.attendance_stats(event.id, staff_user.email).unwrap()
        assert (stats.present, stats.absent, stats.not_validated) == (1, 1, 3)

        assert pipeline.reset_attendance(event.id, registrations[0].id, staff_user.email).unwrap() is True
        assert pipeline.reset_attendance(event.id, uuid4(), staff_user.email).unwrap() is False

    def test_capacity_example(
        self, pipeline: EventPipeline, event_factory: EventFactory, participants: list[RollcallUser]
    ) -> None:
        a, b, c = participants[:3]
        event = event_factory(max_participants=2)
        with freeze_time(T0 + timedelta(hours=1)):
            assert pipeline.register(event.id, a.email).is_ok
            assert pipeline.register(event.id, b.email).is_ok
            full = pipeline.register(event.id, c.email)
            assert isinstance(full, Err) and full.message == "Event is full."
            assert pipeline.unregister(event.id, a.email).is_ok
            assert pipeline.register(event.id, c.email).is_ok

        assert pipeline.registrations.count_active(event.id) == 2


class TestEvents:
    def test_create_and_get_event(self, pipeline: EventPipeline, user: RollcallUser) -> None:
        from events.schema import EventCreateSchema

        payload = EventCreateSchema(title="Picnic", start=T0, end=T0 + timedelta(days=1), max_participants=10)
        event = pipeline.create_event(user.email, payload).unwrap()

        detail = pipeline.get_event(event.id, user.email).unwrap()
        assert detail.event.created_by == user
        assert detail.registered_count == 0
        assert detail.is_registered is False

    def test_only_creator_or_staff_can_update(
        self,
        pipeline: EventPipeline,
        event: Event,
        user: RollcallUser,
        organizer: RollcallUser,
        staff_user: RollcallUser,
    ) -> None:
        from events.schema import EventEditSchema

        denied = pipeline.update_event(event.id, user.email, EventEditSchema(title="Hijacked"))
        assert isinstance(denied, Err) and denied.kind == ErrorKind.UNAUTHORIZED

        renamed = pipeline.update_event(event.id, organizer.email, EventEditSchema(title="Renamed")).unwrap()
        assert renamed.title == "Renamed"
        assert pipeline.update_event(event.id, staff_user.email, EventEditSchema(location="Park")).is_ok
        event.refresh_from_db()
        assert (event.title, event.location) == ("Renamed", "Park")
