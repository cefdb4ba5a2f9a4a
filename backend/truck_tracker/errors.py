from typing import Any, Optional


class TrackerError(Exception):
    """Base class for failures surfaced to API callers."""
    status = 500
    name = "ApplicationError"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> dict:
        error = {"status": self.status, "name": self.name, "message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return {"data": None, "error": error}


class NotFoundError(TrackerError):
    status = 404
    name = "NotFoundError"


class UnauthorizedError(TrackerError):
    status = 401
    name = "UnauthorizedError"


class InvalidInputError(TrackerError):
    status = 400
    name = "ValidationError"


class StorageError(TrackerError):
    status = 500
    name = "ApplicationError"


class ServiceUnavailableError(TrackerError):
    status = 503
    name = "ServiceUnavailableError"
