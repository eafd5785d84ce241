from typing import Any, Mapping, Optional


class ScheduleError(Exception):
    """Base class for errors raised by the feeding schedule services.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (ids, offending values)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for the calling layer
    """

    http_status = 500
    default_message = "Schedule error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
    ):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(ScheduleError):
    """Raised when input is invalid or a required field is missing (bad request).

    Examples: a missing timezone, a negative or non-numeric volume.
    """

    http_status = 400
    default_message = "Invalid input"


class NotFoundError(ScheduleError):
    """Raised when a block or entry is absent or owned by another user.

    Both cases share this kind so that callers cannot probe for other
    users' data.
    """

    http_status = 404
    default_message = "Not found"


class ConflictError(ScheduleError):
    """Raised when a uniqueness rule is violated (duplicate day or block number)."""

    http_status = 409
    default_message = "Conflict"


class ConfigurationError(ScheduleError):
    """Raised for an unrecognized timezone identifier or invalid schedule settings."""

    http_status = 500
    default_message = "Invalid configuration"
