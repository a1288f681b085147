"""WSGI config for the rollcall project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "rollcall.settings")

application = get_wsgi_application()
