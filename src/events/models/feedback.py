import typing as t

from django.conf import settings
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel


class EventFeedbackQuerySet(models.QuerySet["EventFeedback"]):
    def with_user(self) -> t.Self:
        """Select the author."""
        return self.select_related("user")


class EventFeedback(TimeStampedModel):
    """A participant's feedback response for an event. One per (event, user)."""

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="feedbacks")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="event_feedbacks")
    answers = models.JSONField(help_text="Answers to the event's feedback form.")
    submitted_at = models.DateTimeField(default=timezone.now)
    edited_at = models.DateTimeField(null=True, blank=True)

    objects = EventFeedbackQuerySet.as_manager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user"],
                name="unique_event_feedback_user",
            )
        ]
        ordering = ["submitted_at"]

    def __str__(self) -> str:
        return f"Feedback: {self.user_id} -> {self.event_id}"

    def edit(self, answers: dict[str, t.Any]) -> None:
        """Replace the answers and stamp the edit."""
        self.answers = answers
        self.edited_at = timezone.now()
        self.save(update_fields=["answers", "edited_at", "updated_at"])
