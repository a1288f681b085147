"""Explicit result type returned by the event pipeline."""

import typing as t
from dataclasses import dataclass
from enum import StrEnum

T = t.TypeVar("T")


class ErrorKind(StrEnum):
    """Why a pipeline operation failed."""

    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class Ok(t.Generic[T]):
    """A successful outcome carrying the operation value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Return the wrapped value."""
        return self.value


@dataclass(frozen=True)
class Err:
    """A failed outcome: the error kind and a human-readable message."""

    kind: ErrorKind
    message: str

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> t.NoReturn:
        """Raise the matching PipelineError."""
        from events.exceptions import PipelineError

        raise PipelineError(self.message, kind=self.kind)


Result = t.Union[Ok[T], Err]
