"""Custom exception classes for DropZone."""

from typing import List, Optional


class DropZoneError(Exception):
    """
    Base exception class for all DropZone errors.
    """
    pass


class ValidationError(DropZoneError):
    """
    Raised when input is rejected before any remote call is made.
    """
    pass


class FileValidationError(ValidationError):
    """
    Raised when a candidate file violates the size or type constraint.
    """

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason


class StoreError(DropZoneError):
    """
    Base class for failures reported by, or while talking to, the record store.
    """
    pass


class StoreUnavailableError(StoreError):
    """
    Raised when the record store cannot be reached or times out.
    """
    pass


class StoreRequestError(StoreError):
    """
    Raised when the record store rejects a request or reports a failed record.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []


class RecordNotFoundError(DropZoneError):
    """
    Raised when a lookup by id finds nothing.
    """
    pass


class InvalidTransitionError(DropZoneError):
    """
    Raised when an upload is asked to move to a state its current status forbids.
    """
    pass
