"""Events schema package."""

from .attendance import (
    AttendanceDetailSchema,
    AttendanceStatsSchema,
    AttendanceUpdateSchema,
    BulkAttendanceItemSchema,
    BulkAttendanceResultSchema,
    BulkAttendanceSchema,
    EventAttendanceSchema,
)
from .event import EventCreateSchema, EventDetailSchema, EventEditSchema, EventSchema, MinimalEventSchema
from .feedback import (
    FeedbackEligibilitySchema,
    FeedbackFormUpdateSchema,
    FeedbackSchema,
    FeedbackSubmitSchema,
    FeedbackSummarySchema,
)
from .registration import RegistrationCreateSchema, RegistrationSchema

__all__ = [
    # Event
    "EventCreateSchema",
    "EventDetailSchema",
    "EventEditSchema",
    "EventSchema",
    "MinimalEventSchema",
    # Registration
    "RegistrationCreateSchema",
    "RegistrationSchema",
    # Attendance
    "AttendanceDetailSchema",
    "AttendanceStatsSchema",
    "AttendanceUpdateSchema",
    "BulkAttendanceItemSchema",
    "BulkAttendanceResultSchema",
    "BulkAttendanceSchema",
    "EventAttendanceSchema",
    # Feedback
    "FeedbackEligibilitySchema",
    "FeedbackFormUpdateSchema",
    "FeedbackSchema",
    "FeedbackSubmitSchema",
    "FeedbackSummarySchema",
]
