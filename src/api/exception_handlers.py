"""Exception handlers for the API."""

import traceback
import typing as t
from copy import deepcopy

import orjson
import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja.responses import Response

from events.exceptions import PipelineError
from events.service.results import ErrorKind

logger = structlog.get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.CONFLICT: 400,
}


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Args:
        request: The incoming HTTP request.
        exc: The exception.

    Returns:
        The response.
    """
    metadata = {
        "headers": obfuscate(dict(request.headers)),
        "method": request.method,
        "path": request.path,
        "GET": obfuscate(request.GET.dict()),
        "user": str(request.user) if getattr(request, "user", None) else None,
    }
    if request.method in ("POST", "PUT", "PATCH") and request.headers.get("Content-Type") == "application/json":
        try:
            metadata["json_payload"] = obfuscate(orjson.loads(request.body))
        except orjson.JSONDecodeError:  # pragma: no cover
            metadata["json_payload"] = None
    logger.exception("INTERNAL_SERVER_ERROR", metadata=metadata)
    data = {"detail": "Internal Server Error."}
    is_staff = getattr(request, "user", None) and getattr(request.user, "is_staff", False)
    if settings.DEBUG or is_staff:  # pragma: no cover
        data["traceback"] = traceback.format_exc()
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a validation error.

    Args:
        request: The incoming HTTP request.
        exc: The exception.
    """
    logger.warning("VALIDATION_ERROR", path=request.path)
    if hasattr(exc, "error_dict"):
        error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    else:
        error_dict = {"__all__": list(exc.messages)}  # type: ignore[union-attr]
    return Response(status=400, data={"errors": error_dict})


def handle_pipeline_error(request: HttpRequest, exc: PipelineError | t.Type[PipelineError]) -> Response:
    """Map a pipeline error to its status code: not found 404, unauthorized 403, conflict 400."""
    status = STATUS_BY_KIND[exc.kind]
    logger.info("PIPELINE_ERROR", path=request.path, kind=exc.kind, status=status)
    return Response(status=status, data={"detail": exc.message, "code": exc.kind})


SENSITIVE_KEYS = {"password", "token", "refresh", "access", "x-api-key", "authorization", "authentication"}


def obfuscate(data: dict[str, t.Any]) -> dict[str, t.Any]:
    """Obfuscate sensitive data in payloads and headers."""
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data
