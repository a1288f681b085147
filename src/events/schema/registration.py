"""Registration schemas."""

import typing as t
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import AwareDatetime

from accounts.schema import MinimalRollcallUserSchema
from events.models import EventRegistration


class RegistrationCreateSchema(Schema):
    answers: dict[str, t.Any] | None = None


class RegistrationSchema(ModelSchema):
    id: UUID
    event_id: UUID
    user: MinimalRollcallUserSchema
    status: EventRegistration.RegistrationStatus
    attendance_status: EventRegistration.AttendanceStatus
    registered_at: AwareDatetime

    class Meta:
        model = EventRegistration
        fields = ["id", "status", "registered_at", "answers", "attendance_status", "attendance_validated_at"]
