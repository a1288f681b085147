"""Attendance schemas."""

from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field

from accounts.schema import MinimalRollcallUserSchema
from events.models import EventRegistration
from events.service.attendance_service import AttendanceStats

from .event import MinimalEventSchema


class AttendanceUpdateSchema(Schema):
    status: EventRegistration.AttendanceStatus


class BulkAttendanceItemSchema(Schema):
    registration_id: UUID
    status: EventRegistration.AttendanceStatus


class BulkAttendanceSchema(Schema):
    attendances: list[BulkAttendanceItemSchema] = Field(..., min_length=1, max_length=1000)


class BulkAttendanceResultSchema(Schema):
    message: str
    count: int


class AttendanceDetailSchema(ModelSchema):
    """A registration seen from the attendance side."""

    id: UUID
    event_id: UUID
    user: MinimalRollcallUserSchema
    attendance_status: EventRegistration.AttendanceStatus
    attendance_validated_by: MinimalRollcallUserSchema | None = None

    class Meta:
        model = EventRegistration
        fields = ["id", "registered_at", "attendance_status", "attendance_validated_at"]


class AttendanceStatsSchema(Schema):
    event_id: UUID
    total_registered: int
    total_validated: int
    present: int
    absent: int
    excused: int
    not_validated: int
    attendance_rate: float
    validation_rate: float

    @staticmethod
    def resolve_attendance_rate(obj: AttendanceStats) -> float:
        return float(obj.attendance_rate)

    @staticmethod
    def resolve_validation_rate(obj: AttendanceStats) -> float:
        return float(obj.validation_rate)


class EventAttendanceSchema(Schema):
    event: MinimalEventSchema
    registrations: list[AttendanceDetailSchema]
    stats: AttendanceStatsSchema
