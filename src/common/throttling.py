"""Request throttles. Rates come from the THROTTLE_RATES setting."""

from django.conf import settings
from ninja_extra.throttling import AnonRateThrottle, UserRateThrottle


class AnonDefaultThrottle(AnonRateThrottle):
    rate = settings.THROTTLE_RATES["anon"]


class UserDefaultThrottle(UserRateThrottle):
    rate = settings.THROTTLE_RATES["user"]


class AuthThrottle(AnonRateThrottle):
    """Token endpoints, keyed by client address."""

    scope = "auth"
    rate = settings.THROTTLE_RATES["auth"]


class WriteThrottle(UserRateThrottle):
    """Mutating endpoints, keyed by user, counted apart from reads."""

    scope = "write"
    rate = settings.THROTTLE_RATES["write"]
