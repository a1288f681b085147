"""Event schemas."""

import typing as t
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import AwareDatetime, Field, model_validator

from accounts.schema import MinimalRollcallUserSchema
from common.schema import OneToTwoFiftyFiveString, StrippedString
from events.models import Event


class EventEditSchema(Schema):
    title: OneToTwoFiftyFiveString | None = None
    description: StrippedString | None = None
    location: StrippedString | None = None
    start: AwareDatetime | None = None
    end: AwareDatetime | None = Field(None, description="End of the registration window (null = open ended)")
    max_participants: int | None = Field(None, ge=1, description="Max participants (null = unlimited)")
    registration_form: dict[str, t.Any] | None = None

    @model_validator(mode="after")
    def validate_window(self) -> t.Self:
        """End must not precede start when both are given."""
        if self.start and self.end and self.end < self.start:
            raise ValueError("End date must be after start date.")
        return self


class EventCreateSchema(EventEditSchema):
    title: OneToTwoFiftyFiveString
    description: StrippedString = ""
    start: AwareDatetime
    feedback_form: dict[str, t.Any] | None = None
    feedback_deadline: AwareDatetime | None = None


class MinimalEventSchema(ModelSchema):
    id: UUID

    class Meta:
        model = Event
        fields = ["id", "title", "start", "end", "location"]


class EventSchema(ModelSchema):
    id: UUID
    created_by: MinimalRollcallUserSchema
    has_feedback_form: bool

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "description",
            "location",
            "start",
            "end",
            "max_participants",
            "registration_form",
            "feedback_deadline",
            "created_at",
            "updated_at",
        ]


class EventDetailSchema(Schema):
    event: EventSchema
    registered_count: int
    is_registered: bool
    is_full: bool
