from datetime import timedelta

from decouple import config

from .base import SECRET_KEY

# Access tokens carry the user id; the pipeline principal is the user's email.
NINJA_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(hours=config("ACCESS_TOKEN_LIFETIME_HOURS", default=1, cast=int)),
    "REFRESH_TOKEN_LIFETIME": timedelta(days=config("REFRESH_TOKEN_LIFETIME_DAYS", default=30, cast=int)),
    "SIGNING_KEY": SECRET_KEY,
    "AUDIENCE": config("JWT_AUDIENCE", default="rollcall"),
}

NINJA_EXTRA = {
    "NUM_PROXIES": config("NUM_PROXIES", default=0, cast=int),
}

# Rates used by common.throttling, in the "<requests>/<period>" form ninja-extra parses.
THROTTLE_RATES = {
    "anon": config("THROTTLE_ANON_RATE", default="60/min"),
    "user": config("THROTTLE_USER_RATE", default="100/min"),
    "auth": config("THROTTLE_AUTH_RATE", default="20/min"),
    "write": config("THROTTLE_WRITE_RATE", default="30/min"),
}
