import re
import typing as t
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models
from django.db.models.functions import Lower


class RollcallUserQueryset(models.QuerySet["RollcallUser"]):
    """Queryset for RollcallUser."""

    def by_email(self, email: str) -> t.Self:
        """Case-insensitive email lookup restricted to active accounts."""
        return self.filter(email__iexact=email.strip(), is_active=True)


class RollcallUserManager(UserManager["RollcallUser"]):
    def get_queryset(self) -> RollcallUserQueryset:
        """Get queryset for RollcallUser."""
        return RollcallUserQueryset(self.model, using=self._db)

    def by_email(self, email: str) -> RollcallUserQueryset:
        """Case-insensitive email lookup restricted to active accounts."""
        return self.get_queryset().by_email(email)


class RollcallUser(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    preferred_name = models.CharField(db_index=True, max_length=255, blank=True, help_text="Preferred name")
    is_event_staff = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Members of the event staff can validate attendance and review feedback.",
    )

    objects = RollcallUserManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]
        constraints = [
            models.UniqueConstraint(
                Lower("email"),
                name="unique_user_email_case_insensitive",
                condition=~models.Q(email=""),
            )
        ]

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_display_name()

    def get_display_name(self) -> str:
        """Returns the user's preferred name, or their full name as a fallback."""
        return (
            self.preferred_name or self.get_full_name() or re.sub(r"(\W|_)+", " ", self.username.split("@")[0]).title()
        )
