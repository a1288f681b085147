import typing as t

import structlog
from ninja_extra import ControllerBase

from accounts.models import RollcallUser


class UserAwareController(ControllerBase):
    def user(self) -> RollcallUser:
        """Get the user for this request."""
        user = t.cast(RollcallUser, self.context.request.user)  # type: ignore[union-attr]
        structlog.contextvars.bind_contextvars(user_id=str(user.id))
        return user
