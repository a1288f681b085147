"""This module contains the controllers for the authentication app."""

from ninja_extra import api_controller
from ninja_extra.permissions import AllowAny
from ninja_jwt.controller import TokenObtainPairController, TokenVerificationController

from common.throttling import AuthThrottle


@api_controller("/auth/token", tags=["Auth"], permissions=[AllowAny], auth=None, throttle=AuthThrottle())
class AuthController(TokenVerificationController, TokenObtainPairController):
    """Issue, refresh and verify JWT token pairs.

    Every other endpoint authenticates the caller through the bearer token
    obtained here; the token subject is the principal passed to the event
    pipeline.
    """
