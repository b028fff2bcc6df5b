"""
Error kinds and result values shared by the Google-backed services.

Adapters never let Google client exceptions escape: they convert them into a
``ServiceError`` tagged with one of the ``ErrorKind`` values below, either
raised or carried inside a ``Result``. User-facing wording is added later by
the task facade and the routers.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from google.auth.exceptions import GoogleAuthError, RefreshError, TransportError
from googleapiclient.errors import HttpError

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTH = "auth"
    TRANSPORT = "transport"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class ServiceError(Exception):
    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"ServiceError({self.kind.value!r}, {self.message!r})"


@dataclass
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[ServiceError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: ServiceError) -> "Result[T]":
        return cls(error=error)


def _http_status(exc: HttpError) -> Optional[int]:
    status = getattr(exc, "resp", None) and getattr(exc.resp, "status", None)
    try:
        return int(status) if status else None
    except (TypeError, ValueError):
        return None


def classify_google_error(exc: Exception, action: str) -> ServiceError:
    """Map an exception raised by the Google client libraries to a ServiceError.

    ``action`` is a short description of what was being attempted, used as the
    message prefix, e.g. ``"Google Sheets error"``.
    """
    if isinstance(exc, ServiceError):
        return exc

    if isinstance(exc, HttpError):
        status = _http_status(exc)
        reason = exc.reason if hasattr(exc, "reason") else str(exc)
        message = f"{action}: {reason}"
        if status in (401, 403):
            return ServiceError(ErrorKind.AUTH, message)
        if status == 404:
            return ServiceError(ErrorKind.NOT_FOUND, message)
        return ServiceError(ErrorKind.TRANSPORT, message)

    if isinstance(exc, RefreshError):
        return ServiceError(ErrorKind.AUTH, f"{action}: {exc}")
    if isinstance(exc, TransportError):
        return ServiceError(ErrorKind.TRANSPORT, f"{action}: {exc}")
    if isinstance(exc, GoogleAuthError):
        return ServiceError(ErrorKind.AUTH, f"{action}: {exc}")
    if isinstance(exc, OSError):
        return ServiceError(ErrorKind.TRANSPORT, f"{action}: {exc}")

    return ServiceError(ErrorKind.INTERNAL, f"{action}: {exc}")
