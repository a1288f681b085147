from .event import Event
from .feedback import EventFeedback
from .registration import EventRegistration

__all__ = [
    "Event",
    "EventFeedback",
    "EventRegistration",
]
