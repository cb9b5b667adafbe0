"""Domain exceptions shared by the services, the document store and the HTTP layer."""

from __future__ import annotations


class PortalError(Exception):
    """Base class for failures the API reports with a ``{"message": ...}`` body."""

    status_code = 500
    public_message: str | None = None

    @property
    def message(self) -> str:
        return self.public_message or str(self)


class ValidationError(PortalError, ValueError):
    """A required request field is missing or a field value is malformed."""

    status_code = 400


class NotFoundError(PortalError, LookupError):
    """The target of an operation does not exist in the store."""

    status_code = 404


class StoreUnavailableError(PortalError, RuntimeError):
    """The backing document store could not be reached or rejected the call."""

    status_code = 500
    public_message = "Internal Server Error"


class EmailDeliveryError(PortalError, RuntimeError):
    """The transactional email provider did not accept the message."""

    status_code = 500
    public_message = "Failed to send email."


__all__ = [
    "EmailDeliveryError",
    "NotFoundError",
    "PortalError",
    "StoreUnavailableError",
    "ValidationError",
]
