"""Domain Exceptions"""
from typing import List, Optional

from pydantic import BaseModel


class FieldError(BaseModel):
    """A single field-level validation failure"""
    field: str
    message: str


class BookingError(Exception):
    """Base class for booking domain errors"""
    pass


class ValidationError(BookingError, ValueError):
    """Bad or missing input, reported field by field"""

    def __init__(self, errors: List[FieldError], message: Optional[str] = None):
        self.errors = errors
        self.message = message or "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(self.message)

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([FieldError(field=field, message=message)])


class AvailabilityError(BookingError):
    """No capacity left for the requested villa and dates"""
    pass


class StoreUnavailableError(BookingError):
    """The backing store could not be reached"""
    pass


class NotFoundError(BookingError):
    """Referenced record does not exist"""
    pass
