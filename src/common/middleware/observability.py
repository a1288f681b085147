"""Observability middleware for context enrichment."""

import typing as t
import uuid

import structlog
from django.conf import settings
from django.http import HttpRequest, HttpResponse


class StructlogContextMiddleware:
    """Enriches structlog context with request metadata.

    Binds request-level context (request_id, method, path, IP) to all log
    events emitted while the request is being handled.
    """

    def __init__(self, get_response: t.Callable[[HttpRequest], HttpResponse]) -> None:
        """Initialize middleware.

        Args:
            get_response: Django middleware get_response callable
        """
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Process request and bind context.

        Args:
            request: Django HttpRequest

        Returns:
            HttpResponse
        """
        if not settings.ENABLE_OBSERVABILITY:
            return self.get_response(request)

        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()

        context: dict[str, t.Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.path,
            "ip_address": self._get_client_ip(request),
        }
        structlog.contextvars.bind_contextvars(**context)

        response = self.get_response(request)

        # Add request_id to response headers for client-side correlation
        response["X-Request-ID"] = request_id

        structlog.contextvars.clear_contextvars()

        return response

    def _get_client_ip(self, request: HttpRequest) -> str:
        """Extract client IP address from request.

        Checks X-Forwarded-For header first (for proxied requests),
        then falls back to REMOTE_ADDR.
        """
        x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
        if x_forwarded_for:
            # X-Forwarded-For can contain multiple IPs, take the first
            return str(x_forwarded_for.split(",")[0].strip())
        return str(request.META.get("REMOTE_ADDR", "unknown"))
