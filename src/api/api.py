from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI

from accounts.controllers.account import AccountController
from accounts.controllers.auth import AuthController
from common.schema import ResponseOk, VersionResponse
from common.throttling import AnonDefaultThrottle, UserDefaultThrottle
from events.controllers import EVENT_CONTROLLERS
from events.exceptions import PipelineError

from .exception_handlers import handle_django_validation_error, handle_general_exception, handle_pipeline_error

api = NinjaExtraAPI(
    title="Rollcall API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"Rollcall API {settings.VERSION}",
    app_name=f"rollcall-api-{settings.VERSION}",
    urls_namespace="api",
    servers=[
        {"url": settings.SERVICE_URL, "description": settings.SERVICE_DESCRIPTION},
    ],
    throttle=[AnonDefaultThrottle(), UserDefaultThrottle()],
)


@api.get("/version", tags=["Version"], response={200: VersionResponse})
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk})
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API.

    Args:
        request: The incoming HTTP request.

    Returns:
        The response status code and message.
    """
    return 200, ResponseOk()


api.register_controllers(
    # Auth/Account controllers
    AuthController,
    AccountController,
    # Event controllers
    *EVENT_CONTROLLERS,
)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    PipelineError: handle_pipeline_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
