"""
Domain errors raised by the services and access-control gates.

Every error carries a human-readable message and the HTTP status the API
responds with. Translation from storage failures happens once, in the
service layer; route handlers only ever see these types.
"""

from typing import List, Optional, Union


class JoblyError(Exception):
    """Base error. Unrecognized storage failures surface as a plain 500."""

    status_code: int = 500

    def __init__(self, message: Union[str, List[str]], status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"status": self.status_code, "message": self.message}


class ValidationFailedError(JoblyError):
    """Schema or range violation in the request."""
    status_code = 400


class RangeInvalidError(ValidationFailedError):
    """Contradictory or out-of-bounds filter criteria."""


class NotFoundError(JoblyError):
    # 400, not 404: kept for compatibility with existing clients
    status_code = 400


class ConflictError(JoblyError):
    """Uniqueness violation on insert or update."""
    status_code = 400


class ReferenceViolationError(JoblyError):
    """Foreign key points at a row that does not exist."""
    status_code = 400


class UnauthorizedError(JoblyError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)
