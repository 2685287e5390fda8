from fastapi import status


class AppException(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "APP_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}


class NotFound(AppException):
    """A referenced game does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ReferentialFailure(AppException):
    """Constraint violation: dangling game reference or bad enumerated value."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "REFERENTIAL_FAILURE"


class ValidationFailure(AppException):
    """Caller-supplied value violates a length or shape constraint."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_FAILURE"


class StorageFailure(AppException):
    """Store unreachable, commit failed or no pooled connection available."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_FAILURE"
