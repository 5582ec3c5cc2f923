"""
Exception hierarchy for the OfficeFlow client.

Transport, server and local precondition failures are kept apart so the
error-message mapper and the screens can tell them apart.
"""
from typing import Any, Optional


class OfficeFlowError(Exception):
    """Base exception for all client-side failures."""

    @property
    def message(self) -> str:
        return str(self)


class TransportError(OfficeFlowError):
    """No usable response was received from the server."""


class RequestTimeout(TransportError):
    """The request exceeded the configured timeout."""


class ApiError(OfficeFlowError):
    """The server answered with a non-success status."""

    def __init__(self, status_code: int, detail: Any = None, payload: Any = None):
        self.status_code = status_code
        self.detail = detail
        self.payload = payload
        super().__init__(f"Request failed with status code {status_code}")


class PreconditionError(OfficeFlowError):
    """A local check failed before any request was sent."""


class MockLocationError(PreconditionError):
    """The OS reported the location as coming from a spoofing tool."""


class LocationUnavailableError(PreconditionError):
    """No usable GPS fix could be obtained."""


class ValidationError(OfficeFlowError):
    """User input is incomplete or invalid."""


class CameraError(OfficeFlowError):
    """The camera could not produce a picture."""


class StorageError(OfficeFlowError):
    """The secure store could not be read or written."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)
