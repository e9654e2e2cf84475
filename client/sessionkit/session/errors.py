"""Failures raised by SessionClient when talking to the authentication service."""

from typing import Optional


class AuthServiceError(Exception):
    """Base class for a failed call to the authentication service.

    ``message`` is the human-readable reason reported by the service (or
    produced locally for transport problems); it is None when the service
    gave none, so callers can substitute their own fallback text.
    """

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or f"Authentication service request failed (status {status_code})")
        self.message = message
        self.status_code = status_code


class RequestRejectedError(AuthServiceError):
    """The service answered with a non-2xx status."""


class NotAuthenticatedError(RequestRejectedError):
    """401/403 on a call that requires an existing session."""


class TransportFailureError(AuthServiceError):
    """The request produced no usable response (connect, read, timeout or decoding error)."""


class InvalidResponseError(AuthServiceError):
    """A 2xx response whose body did not have the expected shape."""
