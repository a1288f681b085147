from .service.results import ErrorKind


class PipelineError(Exception):
    """Raised when an event pipeline operation fails.

    Carries the error kind so that the API can map it to a status code.
    """

    kind: ErrorKind = ErrorKind.CONFLICT

    def __init__(self, message: str, kind: ErrorKind | None = None) -> None:
        """Initialize the exception with a message and, optionally, a kind override."""
        super().__init__(message)
        self.message = str(message)
        if kind is not None:
            self.kind = kind


class NotFoundError(PipelineError):
    """Raised when an event or registration cannot be found."""

    kind = ErrorKind.NOT_FOUND


class UnauthorizedError(PipelineError):
    """Raised when the caller cannot be resolved or lacks the event-staff capability."""

    kind = ErrorKind.UNAUTHORIZED


class ConflictError(PipelineError):
    """Raised when an operation violates a business rule given the current state."""

    kind = ErrorKind.CONFLICT
