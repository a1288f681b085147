from .attendance import AttendanceController
from .events import EventController
from .feedback import FeedbackController
from .registrations import RegistrationController

EVENT_CONTROLLERS: list[type] = [
    EventController,
    RegistrationController,
    AttendanceController,
    FeedbackController,
]

__all__ = [
    "AttendanceController",
    "EventController",
    "FeedbackController",
    "RegistrationController",
    "EVENT_CONTROLLERS",
]
