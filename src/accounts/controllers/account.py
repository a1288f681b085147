"""This module contains the controllers for the account app."""

from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from accounts.models import RollcallUser
from accounts.schema import RollcallUserSchema
from common.controllers import UserAwareController
from common.throttling import UserDefaultThrottle


@api_controller("/account", tags=["Account"], auth=JWTAuth(), throttle=UserDefaultThrottle())
class AccountController(UserAwareController):
    @route.get("/me", url_name="me", response=RollcallUserSchema)
    def me(self) -> RollcallUser:
        """Return the authenticated user, including whether they carry the event-staff capability."""
        return self.user()
