"""Identity resolution and the event-staff capability."""

import typing as t

from accounts.models import RollcallUser

StaffPredicate = t.Callable[[RollcallUser], bool]


def resolve_identity(email: str) -> RollcallUser | None:
    """Resolve a principal email to an active user, case-insensitively."""
    if not email:
        return None
    return RollcallUser.objects.by_email(email).first()


def has_staff_capability(user: RollcallUser) -> bool:
    """Whether the user may validate attendance and review feedback."""
    return user.is_active and (user.is_event_staff or user.is_superuser)
