import typing as t

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Count, Q
from django.utils import timezone

from common.models import TimeStampedModel


class EventQuerySet(models.QuerySet["Event"]):
    def with_creator(self) -> t.Self:
        """Select the creator for serialization."""
        return self.select_related("created_by")

    def with_registered_count(self) -> t.Self:
        """Annotate the number of active registrations."""
        from .registration import EventRegistration

        return self.annotate(
            registered_count=Count(
                "registrations",
                filter=Q(registrations__status=EventRegistration.RegistrationStatus.ACTIVE),
                distinct=True,
            )
        )


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Get base queryset."""
        return EventQuerySet(self.model, using=self._db)

    def with_creator(self) -> EventQuerySet:
        """Select the creator for serialization."""
        return self.get_queryset().with_creator()

    def with_registered_count(self) -> EventQuerySet:
        """Annotate the number of active registrations."""
        return self.get_queryset().with_registered_count()


class Event(TimeStampedModel):
    """A community event.

    The [start, end] interval is the registration window. Registrations are
    capped by max_participants when it is set. Feedback is collected through
    feedback_form until feedback_deadline.
    """

    title = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")
    location = models.CharField(max_length=255, blank=True, null=True)
    start = models.DateTimeField(db_index=True)
    end = models.DateTimeField(null=True, blank=True, db_index=True)
    max_participants = models.PositiveIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1)], help_text="Leave empty for unlimited capacity."
    )
    registration_form = models.JSONField(
        null=True, blank=True, help_text="Form definition presented to participants when they register."
    )
    feedback_form = models.JSONField(
        null=True, blank=True, help_text="Form definition for post-event feedback. Feedback is disabled when empty."
    )
    feedback_deadline = models.DateTimeField(
        null=True, blank=True, help_text="Feedback can be submitted or edited until this moment. Empty means no limit."
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="created_events"
    )

    objects = EventManager()

    class Meta:
        ordering = ["start"]

    def __str__(self) -> str:
        return self.title

    def clean(self) -> None:
        """Validate the registration window."""
        super().clean()
        if self.end and self.start and self.end < self.start:
            raise DjangoValidationError({"end": "End date must be after start date."})

    @property
    def has_feedback_form(self) -> bool:
        """Whether a non-empty feedback form is configured."""
        return bool(self.feedback_form)

    def registration_not_started(self) -> bool:
        """Check if the registration window has not opened yet. The start bound is inclusive."""
        return timezone.now() < self.start

    def registration_ended(self) -> bool:
        """Check if the registration window has closed. The end bound is inclusive; no end means never."""
        return self.end is not None and timezone.now() > self.end

    def is_feedback_deadline_passed(self) -> bool:
        """Check if the feedback deadline is set and has passed."""
        return self.feedback_deadline is not None and timezone.now() > self.feedback_deadline
