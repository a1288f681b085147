import typing as t
from datetime import UTC, datetime

from events.models import Event

T0 = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)

FEEDBACK_FORM = {"questions": [{"id": "rating", "type": "scale", "min": 1, "max": 5}]}


class EventFactory(t.Protocol):
    def __call__(self, **kwargs: t.Any) -> Event: ...
