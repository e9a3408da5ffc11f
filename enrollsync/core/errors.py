# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Errors raised by enrollment backends and their classification.

Backends raise these exceptions (or arbitrary ones). The fetcher and the
bulk coordinator never let them escape; they turn every failure into an
ErrorKind with classify_error().
"""

import asyncio
from typing import Any

from enrollsync.models.enrollment import ErrorKind

HTTP_STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.INVALID,
    401: ErrorKind.FORBIDDEN,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    405: ErrorKind.UNSUPPORTED,
    408: ErrorKind.TIMEOUT,
    410: ErrorKind.NOT_FOUND,
    422: ErrorKind.INVALID,
    501: ErrorKind.UNSUPPORTED,
    502: ErrorKind.NETWORK,
    503: ErrorKind.NETWORK,
    504: ErrorKind.TIMEOUT,
}


class EnrollmentSourceError(Exception):
    """Base exception for enrollment backend errors.

    Attributes:
        message: Error description.
        details: Additional error details.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ClassNotFoundError(EnrollmentSourceError):
    """Raised when a class is not found."""

    kind = ErrorKind.NOT_FOUND


class StudentNotFoundError(EnrollmentSourceError):
    """Raised when a student is not found."""

    kind = ErrorKind.NOT_FOUND


class UnsupportedOperationError(EnrollmentSourceError):
    """Raised when the backend does not implement an operation."""

    kind = ErrorKind.UNSUPPORTED


class SourceUnavailableError(EnrollmentSourceError):
    """Raised when the backend cannot be reached."""

    kind = ErrorKind.NETWORK


class InvalidRequestError(EnrollmentSourceError):
    """Raised when a request is malformed."""

    kind = ErrorKind.INVALID


class AccessDeniedError(EnrollmentSourceError):
    """Raised when the caller may not perform the operation."""

    kind = ErrorKind.FORBIDDEN


def _status_code(exc: BaseException) -> int | None:
    status = getattr(exc, "status_code", None)
    if status is None:
        response = getattr(exc, "response", None)
        status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception raised by a backend call to an ErrorKind.

    HTTP client errors are recognized by a ``status_code`` attribute on the
    exception or on its ``response``.

    Args:
        exc: Exception raised by the backend.

    Returns:
        Matching ErrorKind, ErrorKind.UNKNOWN if nothing matches.
    """
    if isinstance(exc, EnrollmentSourceError):
        return exc.kind
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorKind.TIMEOUT
    if isinstance(exc, NotImplementedError):
        return ErrorKind.UNSUPPORTED

    status = _status_code(exc)
    if status is not None:
        if status in HTTP_STATUS_KINDS:
            return HTTP_STATUS_KINDS[status]
        return ErrorKind.NETWORK if status >= 500 else ErrorKind.UNKNOWN

    if isinstance(exc, (ConnectionError, OSError)):
        return ErrorKind.NETWORK
    if isinstance(exc, ValueError):
        return ErrorKind.INVALID
    return ErrorKind.UNKNOWN


def describe_error(exc: BaseException) -> str:
    """Short text for an exception, falling back to its type name."""
    return str(exc) or type(exc).__name__
