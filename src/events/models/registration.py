import typing as t
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel

if t.TYPE_CHECKING:
    from accounts.models import RollcallUser


class EventRegistrationQuerySet(models.QuerySet["EventRegistration"]):
    """Custom queryset for EventRegistration model."""

    def for_event(self, event_id: UUID) -> t.Self:
        """Registrations of a single event."""
        return self.filter(event_id=event_id)

    def active(self) -> t.Self:
        """Registrations that have not been cancelled."""
        return self.filter(status=EventRegistration.RegistrationStatus.ACTIVE)

    def present(self) -> t.Self:
        """Registrations whose attendance was confirmed."""
        return self.filter(attendance_status=EventRegistration.AttendanceStatus.PRESENT)

    def with_users(self) -> t.Self:
        """Select the participant and the attendance validator."""
        return self.select_related("user", "attendance_validated_by")


class EventRegistrationManager(models.Manager["EventRegistration"]):
    """Custom manager for EventRegistration."""

    def get_queryset(self) -> EventRegistrationQuerySet:
        """Get base queryset."""
        return EventRegistrationQuerySet(self.model, using=self._db)

    def for_event(self, event_id: UUID) -> EventRegistrationQuerySet:
        """Registrations of a single event."""
        return self.get_queryset().for_event(event_id)

    def with_users(self) -> EventRegistrationQuerySet:
        """Select the participant and the attendance validator."""
        return self.get_queryset().with_users()


class EventRegistration(TimeStampedModel):
    """A participant's registration to an event.

    Cancelling flips the status; the row is kept and reactivated on the next
    registration, so there is at most one row per (event, user).
    """

    class RegistrationStatus(models.TextChoices):
        ACTIVE = "active", "Active"
        CANCELLED = "cancelled", "Cancelled"

    class AttendanceStatus(models.TextChoices):
        UNVALIDATED = "unvalidated", "Not yet validated"
        PRESENT = "present", "Present"
        ABSENT = "absent", "Absent"
        EXCUSED = "excused", "Excused"

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="registrations")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="registrations")
    status = models.CharField(
        max_length=20, choices=RegistrationStatus.choices, default=RegistrationStatus.ACTIVE, db_index=True
    )
    registered_at = models.DateTimeField(default=timezone.now)
    answers = models.JSONField(null=True, blank=True, help_text="Answers to the event's registration form.")
    attendance_status = models.CharField(
        max_length=20, choices=AttendanceStatus.choices, default=AttendanceStatus.UNVALIDATED, db_index=True
    )
    attendance_validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="validated_registrations",
    )
    attendance_validated_at = models.DateTimeField(null=True, blank=True)

    objects = EventRegistrationManager()

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "user"],
                name="unique_event_registration_user",
            )
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="idx_registration_event_status"),
        ]
        ordering = ["registered_at"]

    def __str__(self) -> str:
        return f"Registration: {self.user_id} -> {self.event_id} ({self.status})"

    def clean(self) -> None:
        """Validator and timestamp go together with a validated attendance status."""
        super().clean()
        validated = self.attendance_status != self.AttendanceStatus.UNVALIDATED
        if validated and self.attendance_validated_at is None:
            raise DjangoValidationError({"attendance_validated_at": "Validated attendance requires a timestamp."})
        if not validated and (self.attendance_validated_at is not None or self.attendance_validated_by_id):
            raise DjangoValidationError({"attendance_status": "Unvalidated attendance cannot carry a validator."})

    @property
    def is_active(self) -> bool:
        """Whether the registration counts toward capacity."""
        return self.status == self.RegistrationStatus.ACTIVE

    def reactivate(self, answers: dict[str, t.Any] | None) -> None:
        """Turn a cancelled registration back into an active one."""
        self.status = self.RegistrationStatus.ACTIVE
        self.registered_at = timezone.now()
        self.answers = answers
        self.save(update_fields=["status", "registered_at", "answers", "updated_at"])

    def cancel(self) -> None:
        """Soft-cancel the registration."""
        self.status = self.RegistrationStatus.CANCELLED
        self.save(update_fields=["status", "updated_at"])

    def apply_attendance(self, status: "EventRegistration.AttendanceStatus", validator: "RollcallUser") -> None:
        """Set attendance fields in memory. Callers persist."""
        now = timezone.now()
        self.attendance_status = status
        self.attendance_validated_by = validator
        self.attendance_validated_at = now
        # bulk_update does not apply auto_now
        self.updated_at = now

    def clear_attendance(self) -> None:
        """Reset attendance fields in memory. Callers persist."""
        self.attendance_status = self.AttendanceStatus.UNVALIDATED
        self.attendance_validated_by = None
        self.attendance_validated_at = None
