from uuid import UUID

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from common.schema import ErrorResponse
from common.throttling import UserDefaultThrottle, WriteThrottle
from events import models, schema
from events.service.attendance_service import AttendanceStats, EventAttendance
from events.service.enums import Messages
from events.service.results import ErrorKind

from .base import EventPipelineController


@api_controller("/events/{event_id}/attendance", auth=JWTAuth(), tags=["Attendance"], throttle=UserDefaultThrottle())
class AttendanceController(EventPipelineController):
    @route.get("", url_name="event_attendance", response=schema.EventAttendanceSchema)
    def get_event_attendance(self, event_id: UUID) -> EventAttendance:
        """The event's active registrations with their attendance, and attendance statistics."""
        return self.pipeline.event_attendance(event_id, self.principal()).unwrap()

    @route.get("/stats", url_name="attendance_stats", response=schema.AttendanceStatsSchema)
    def get_attendance_stats(self, event_id: UUID) -> AttendanceStats:
        """Attendance counts and rates over the event's active registrations."""
        return self.pipeline.attendance_stats(event_id, self.principal()).unwrap()

    @route.put(
        "",
        url_name="event_attendance",
        response=schema.BulkAttendanceResultSchema,
        throttle=WriteThrottle(),
    )
    def validate_attendance_bulk(self, event_id: UUID, payload: schema.BulkAttendanceSchema) -> dict[str, object]:
        """Validate the attendance of many registrations at once. Event staff only.

        Unknown, foreign and cancelled registrations are skipped; the response reports how many were updated.
        """
        items = [(item.registration_id, item.status) for item in payload.attendances]
        count = self.pipeline.validate_attendance_bulk(event_id, items, self.principal()).unwrap()
        return {"message": f"Successfully validated {count} attendances", "count": count}

    @route.put(
        "/{registration_id}",
        url_name="registration_attendance",
        response=schema.AttendanceDetailSchema,
        throttle=WriteThrottle(),
    )
    def validate_attendance(
        self, event_id: UUID, registration_id: UUID, payload: schema.AttendanceUpdateSchema
    ) -> models.EventRegistration:
        """Mark an active registration as present, absent or excused. Event staff only."""
        return self.pipeline.validate_attendance(event_id, registration_id, payload.status, self.principal()).unwrap()

    @route.delete(
        "/{registration_id}",
        url_name="registration_attendance",
        response={204: None, 404: ErrorResponse},
        throttle=WriteThrottle(),
    )
    def reset_attendance(self, event_id: UUID, registration_id: UUID) -> tuple[int, ErrorResponse | None]:
        """Clear the attendance of a registration. Event staff only."""
        if self.pipeline.reset_attendance(event_id, registration_id, self.principal()).unwrap():
            return 204, None
        return 404, ErrorResponse(detail=Messages.REGISTRATION_NOT_FOUND, code=ErrorKind.NOT_FOUND)
