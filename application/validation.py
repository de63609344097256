"""Booking draft and field-level validation"""
import re
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.enums import BookingSource, SafariTiming
from domain.entities import Villa, Package, SafariOption
from domain.exceptions import FieldError, ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[6-9]\d{9}$")
NAME_RE = re.compile(r"^[a-zA-Z\s]+$")


class SafariSelection(BaseModel):
    """Safari the guest picked in the wizard"""
    safari_option_id: str
    preferred_date: Optional[date] = None
    preferred_timing: Optional[SafariTiming] = None
    persons: int = Field(ge=1, le=6, default=1)


class BookingDraft(BaseModel):
    """Transient wizard state submitted for booking"""
    villa_id: str
    check_in: date
    check_out: date
    guests: int
    package_id: Optional[str] = None
    safari_requests: List[SafariSelection] = []
    guest_name: str
    email: str
    phone: str
    special_requests: Optional[str] = None
    session_id: Optional[str] = None
    booking_source: BookingSource = BookingSource.WEBSITE


def validate_email(email: str) -> Optional[FieldError]:
    if not email:
        return FieldError(field="email", message="Email is required")
    if not EMAIL_RE.match(email):
        return FieldError(field="email", message="Please enter a valid email address")
    return None


def validate_phone(phone: str) -> Optional[FieldError]:
    if not phone:
        return FieldError(field="phone", message="Phone number is required")
    digits = re.sub(r"\D", "", phone)
    if not PHONE_RE.match(digits):
        return FieldError(field="phone", message="Please enter a valid 10-digit Indian mobile number")
    return None


def validate_name(name: str, field: str = "guest_name") -> Optional[FieldError]:
    cleaned = (name or "").strip()
    if len(cleaned) < 2:
        return FieldError(field=field, message="Name must be at least 2 characters long")
    if len(cleaned) > 50:
        return FieldError(field=field, message="Name must be less than 50 characters")
    if not NAME_RE.match(cleaned):
        return FieldError(field=field, message="Name can only contain letters and spaces")
    return None


def validate_dates(
    check_in: date,
    check_out: date,
    today: Optional[date] = None,
    max_nights: Optional[int] = None
) -> List[FieldError]:
    """Ordering always; past check-in only when today is given"""
    errors = []
    if today is not None and check_in < today:
        errors.append(FieldError(field="check_in", message="Check-in date cannot be in the past"))
    if check_out <= check_in:
        errors.append(FieldError(field="check_out", message="Check-out date must be after check-in date"))
    elif max_nights is not None and (check_out - check_in).days > max_nights:
        errors.append(FieldError(field="check_out", message=f"Maximum stay duration is {max_nights} nights"))
    return errors


def ensure_date_order(check_in: date, check_out: date) -> None:
    """Raise instead of silently swapping reversed dates"""
    errors = validate_dates(check_in, check_out)
    if errors:
        raise ValidationError(errors)


def validate_guests(guests: int, max_guests: int) -> Optional[FieldError]:
    if guests is None or guests < 1:
        return FieldError(field="guests", message="At least 1 guest is required")
    if guests > max_guests:
        return FieldError(field="guests", message=f"Maximum {max_guests} guests allowed for this villa")
    return None


def validate_draft(
    draft: BookingDraft,
    villa: Optional[Villa],
    package: Optional[Package],
    safari_options: List[Optional[SafariOption]],
    today: date,
    max_stay_nights: int,
    max_guests_per_booking: int
) -> None:
    """Collect every field error in the draft and raise them together"""
    errors: List[FieldError] = []

    if villa is None:
        errors.append(FieldError(field="villa_id", message=f"Villa {draft.villa_id} not found"))
    elif not villa.is_active:
        errors.append(FieldError(field="villa_id", message=f"Villa {villa.name} is not accepting bookings"))

    errors.extend(validate_dates(draft.check_in, draft.check_out, today, max_stay_nights))

    max_guests = min(villa.max_guests, max_guests_per_booking) if villa else max_guests_per_booking
    guest_error = validate_guests(draft.guests, max_guests)
    if guest_error:
        errors.append(guest_error)

    if draft.package_id is not None:
        if package is None:
            errors.append(FieldError(field="package_id", message=f"Package {draft.package_id} not found"))
        elif not package.is_active:
            errors.append(FieldError(field="package_id", message=f"Package {package.name} is not available"))

    for selection, option in zip(draft.safari_requests, safari_options):
        if option is None or not option.is_active:
            errors.append(FieldError(
                field="safari_requests",
                message=f"Safari option {selection.safari_option_id} is not available"
            ))
        elif selection.persons > option.max_persons:
            errors.append(FieldError(
                field="safari_requests",
                message=f"Maximum {option.max_persons} persons for {option.name}"
            ))

    for check in (validate_name(draft.guest_name), validate_email(draft.email), validate_phone(draft.phone)):
        if check:
            errors.append(check)

    if errors:
        raise ValidationError(errors)
