"""Feedback schemas."""

import typing as t
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import AwareDatetime, Field

from accounts.schema import MinimalRollcallUserSchema
from events.models import EventFeedback
from events.service.enums import EligibilityReason
from events.service.feedback_service import FeedbackSummary


class FeedbackSubmitSchema(Schema):
    answers: dict[str, t.Any] = Field(..., min_length=1)


class FeedbackFormUpdateSchema(Schema):
    feedback_form: dict[str, t.Any] | None = None
    feedback_deadline: AwareDatetime | None = None


class FeedbackSchema(ModelSchema):
    id: UUID
    event_id: UUID
    user: MinimalRollcallUserSchema

    class Meta:
        model = EventFeedback
        fields = ["id", "answers", "submitted_at", "edited_at"]


class FeedbackEligibilitySchema(Schema):
    event_id: UUID
    can_submit: bool
    reason: EligibilityReason | None = None
    has_submitted: bool
    existing_feedback: FeedbackSchema | None = None
    feedback_form: dict[str, t.Any] | None = None
    deadline: AwareDatetime | None = None


class FeedbackSummarySchema(Schema):
    event_id: UUID
    event_title: str
    total_attendees: int
    total_feedbacks: int
    response_rate: float
    deadline: AwareDatetime | None = None
    has_feedback_form: bool

    @staticmethod
    def resolve_response_rate(obj: FeedbackSummary) -> float:
        return float(obj.response_rate)
