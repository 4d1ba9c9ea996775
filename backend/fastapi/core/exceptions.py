"""
Domain errors raised by the CRUD layer.

Each error is an ``HTTPException`` so it propagates straight through the
endpoints to the caller with its status code and structured ``detail``.
"""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status


class WashTrackerError(HTTPException):
    """Base class for errors reported to the caller."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, names: Optional[List[str]] = None):
        detail: Dict[str, Any] = {"message": message}
        if names:
            detail["names"] = names
        super().__init__(status_code=self.status_code, detail=detail)
        self.message = message
        self.names = names or []


class ValidationError(WashTrackerError):
    """Missing or malformed submission fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnresolvedReferenceError(WashTrackerError):
    """A named washer or service item is unknown, inactive or out of branch."""

    status_code = status.HTTP_400_BAD_REQUEST


class PolicyViolationError(WashTrackerError):
    """A submission breaks one of the attribution or pricing rules."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(WashTrackerError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(WashTrackerError):
    status_code = status.HTTP_409_CONFLICT


class StoreError(WashTrackerError):
    """Persistence failure. The message never carries driver details."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Failed to save changes, please retry"):
        super().__init__(message)
