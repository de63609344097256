"""Domain Entities - Aggregates"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from datetime import datetime, date, timedelta, timezone
from typing import Optional, List
from decimal import Decimal
import random
import string

from domain.enums import (
    BookingStatus, PaymentStatus, VillaStatus, PricingRuleType,
    BookingSource, SafariTiming, EnquiryStatus
)
from domain.value_objects import DateRange, GuestContact, SafariAddOn, BookingTotals

ALL_VILLAS = "all"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _random_suffix(length: int) -> str:
    return ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))


class Villa(BaseModel):
    """Bookable villa type"""
    id: str
    name: str
    description: str = ""
    base_price: int = Field(gt=0)
    max_guests: int = Field(ge=1)
    status: VillaStatus = VillaStatus.ACTIVE
    amenities: List[str] = []
    images: List[str] = []
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    class Config:
        from_attributes = True

    @property
    def is_active(self) -> bool:
        return self.status == VillaStatus.ACTIVE

    def toggle_status(self) -> VillaStatus:
        """Flip between active and inactive"""
        self.status = VillaStatus.INACTIVE if self.is_active else VillaStatus.ACTIVE
        self.updated_at = _utcnow()
        return self.status

    def update_details(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        max_guests: Optional[int] = None,
        amenities: Optional[List[str]] = None,
        images: Optional[List[str]] = None
    ) -> None:
        """Edit listing details; price has its own method"""
        if name is not None:
            if not name.strip():
                raise ValueError("Villa name cannot be empty")
            self.name = name.strip()
        if max_guests is not None:
            if max_guests < 1:
                raise ValueError("Max guests must be at least 1")
            self.max_guests = max_guests
        if description is not None:
            self.description = description
        if amenities is not None:
            self.amenities = amenities
        if images is not None:
            self.images = images
        self.updated_at = _utcnow()

    def update_pricing(self, base_price: int) -> None:
        if base_price <= 0:
            raise ValueError("Base price must be greater than 0")
        self.base_price = base_price
        self.updated_at = _utcnow()


class Package(BaseModel):
    """Meal/stay package priced per night"""
    id: str
    name: str
    description: str = ""
    inclusions: List[str] = []
    price: int = Field(ge=0)
    duration: str = "Per night"
    is_active: bool = True

    class Config:
        from_attributes = True

    def update_details(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        inclusions: Optional[List[str]] = None,
        price: Optional[int] = None,
        duration: Optional[str] = None
    ) -> None:
        if name is not None:
            if not name.strip():
                raise ValueError("Package name cannot be empty")
            self.name = name.strip()
        if price is not None:
            if price < 0:
                raise ValueError("Package price cannot be negative")
            self.price = price
        if description is not None:
            self.description = description
        if inclusions is not None:
            self.inclusions = inclusions
        if duration is not None:
            self.duration = duration

    def toggle_status(self) -> bool:
        self.is_active = not self.is_active
        return self.is_active


class SafariOption(BaseModel):
    """Safari add-on with a flat price"""
    id: str
    name: str
    description: str = ""
    duration: str = ""
    price: int = Field(ge=0)
    max_persons: int = Field(ge=1, default=6)
    timings: List[SafariTiming] = []
    highlights: List[str] = []
    is_active: bool = True

    class Config:
        from_attributes = True


class PricingRule(BaseModel):
    """Date-ranged multiplicative price adjustment"""
    rule_id: UUID = Field(default_factory=uuid4)
    villa_id: str = ALL_VILLAS
    rule_name: str
    rule_type: PricingRuleType = PricingRuleType.SEASONAL
    price_modifier: Decimal = Field(gt=0)
    is_active: bool = True
    start_date: date
    end_date: date
    created_at: datetime = Field(default_factory=_utcnow)

    class Config:
        from_attributes = True

    def covers(self, villa_id: str, on_date: date) -> bool:
        """Active, scoped to the villa (or all villas) and in range, inclusive"""
        if not self.is_active:
            return False
        if self.villa_id not in (villa_id, ALL_VILLAS):
            return False
        return self.start_date <= on_date <= self.end_date


class DateOverride(BaseModel):
    """Absolute price pinned to one villa and date"""
    villa_id: str
    on_date: date
    price_override: int = Field(gt=0)
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class Booking(BaseModel):
    """Booking Aggregate Root Entity"""

    # Identity
    booking_id: UUID = Field(default_factory=uuid4)
    booking_code: str
    session_id: Optional[str] = None

    # Villa snapshot
    villa_id: str
    villa_name: str
    villa_price: int

    # Stay
    date_range: DateRange
    guests: int = Field(ge=1)

    # Package snapshot
    package_id: Optional[str] = None
    package_name: Optional[str] = None
    package_price: int = 0

    safari_requests: List[SafariAddOn] = []

    # Amounts
    safari_total: int = 0
    subtotal: int
    taxes: int
    total_amount: int
    advance_amount: int = 0
    remaining_amount: int = 0

    # Status
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_reference: Optional[str] = None

    # Guest
    contact: GuestContact
    special_requests: Optional[str] = None
    admin_notes: Optional[str] = None
    booking_source: BookingSource = BookingSource.WEBSITE

    # Metadata
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    version: int = 1

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        booking_code: str,
        villa: Villa,
        date_range: DateRange,
        guests: int,
        contact: GuestContact,
        totals: BookingTotals,
        package: Optional[Package] = None,
        safari_requests: Optional[List[SafariAddOn]] = None,
        special_requests: Optional[str] = None,
        session_id: Optional[str] = None,
        booking_source: BookingSource = BookingSource.WEBSITE,
        created_at: Optional[datetime] = None
    ) -> "Booking":
        """Create a pending booking with price snapshots"""
        created_at = created_at or _utcnow()
        return Booking(
            booking_code=booking_code,
            session_id=session_id,
            villa_id=villa.id,
            villa_name=villa.name,
            villa_price=villa.base_price,
            date_range=date_range,
            guests=guests,
            package_id=package.id if package else None,
            package_name=package.name if package else None,
            package_price=package.price if package else 0,
            safari_requests=list(safari_requests or []),
            safari_total=totals.safari_total,
            subtotal=totals.subtotal,
            taxes=totals.taxes,
            total_amount=totals.total_amount,
            advance_amount=0,
            remaining_amount=totals.total_amount,
            contact=contact,
            special_requests=special_requests,
            booking_source=booking_source,
            status=BookingStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            created_at=created_at,
            updated_at=created_at
        )

    @staticmethod
    def generate_booking_code(now: Optional[datetime] = None) -> str:
        """Timestamp plus random suffix, e.g. VM1718000000000K3X9Q"""
        now = now or _utcnow()
        return f"VM{int(now.timestamp() * 1000)}{_random_suffix(5)}"

    # ==================== MODIFICATION METHODS ====================
    def modify(
        self,
        contact: Optional[GuestContact] = None,
        date_range: Optional[DateRange] = None,
        guests: Optional[int] = None,
        totals: Optional[BookingTotals] = None,
        special_requests: Optional[str] = None,
        admin_notes: Optional[str] = None
    ) -> None:
        """Apply admin edits; callers recompute totals when the dates change"""
        if self.is_terminal():
            raise ValueError(f"Cannot modify booking with status {self.status.value}")

        if contact:
            self.contact = contact
        if date_range:
            self.date_range = date_range
        if guests is not None:
            self.guests = guests
        if totals:
            self._apply_totals(totals)
        if special_requests is not None:
            self.special_requests = special_requests
        if admin_notes is not None:
            self.admin_notes = admin_notes

        self._touch()

    def _apply_totals(self, totals: BookingTotals) -> None:
        paid = self.total_amount - self.remaining_amount
        self.safari_total = totals.safari_total
        self.subtotal = totals.subtotal
        self.taxes = totals.taxes
        self.total_amount = totals.total_amount
        self.remaining_amount = max(0, totals.total_amount - paid)

        # A repriced stay reopens or settles the balance
        if self.payment_status == PaymentStatus.PAID and self.remaining_amount > 0:
            self.payment_status = PaymentStatus.ADVANCE_PAID
        elif self.payment_status == PaymentStatus.ADVANCE_PAID and self.remaining_amount == 0:
            self.payment_status = PaymentStatus.PAID

    # ==================== PAYMENT METHODS ====================
    def record_payment(self, amount: int, reference: Optional[str] = None) -> None:
        """Record a full or advance payment.

        A failed booking has already released its unit, so it cannot be paid
        back into inventory; the guest books again instead.
        """
        if self.is_terminal():
            raise ValueError(f"Cannot take payment for booking with status {self.status.value}")
        if self.payment_status in (PaymentStatus.PAID, PaymentStatus.FAILED, PaymentStatus.REFUNDED):
            raise ValueError(f"Cannot take payment when payment status is {self.payment_status.value}")
        if amount <= 0:
            raise ValueError("Payment amount must be greater than 0")

        if amount >= self.remaining_amount:
            self.advance_amount += self.remaining_amount
            self.remaining_amount = 0
            self.payment_status = PaymentStatus.PAID
        else:
            self.advance_amount += amount
            self.remaining_amount -= amount
            self.payment_status = PaymentStatus.ADVANCE_PAID

        self.payment_reference = reference
        self._touch()

    def mark_payment_failed(self) -> None:
        """Payment attempt failed; the booking stops holding inventory"""
        if self.payment_status != PaymentStatus.PENDING:
            raise ValueError(
                f"Cannot mark payment failed when payment status is {self.payment_status.value}"
            )
        self.payment_status = PaymentStatus.FAILED
        self._touch()

    def refund(self) -> None:
        """Refund a cancelled booking that had been paid"""
        if self.status != BookingStatus.CANCELLED:
            raise ValueError("Only cancelled bookings can be refunded")
        if self.payment_status not in (PaymentStatus.PAID, PaymentStatus.ADVANCE_PAID):
            raise ValueError(f"Cannot refund when payment status is {self.payment_status.value}")
        self.payment_status = PaymentStatus.REFUNDED
        self._touch()

    # ==================== STATE TRANSITION METHODS ====================
    def confirm(self) -> None:
        """Confirm booking once at least an advance has been paid"""
        if self.status != BookingStatus.PENDING:
            raise ValueError(f"Cannot confirm booking with status {self.status.value}")
        if self.payment_status not in (PaymentStatus.PAID, PaymentStatus.ADVANCE_PAID):
            raise ValueError("Payment must be received before confirming")

        self.status = BookingStatus.CONFIRMED
        self._touch()

    def cancel(self) -> None:
        """Cancel a pending or confirmed booking"""
        if self.status not in (BookingStatus.PENDING, BookingStatus.CONFIRMED):
            raise ValueError(f"Cannot cancel booking with status {self.status.value}")

        self.status = BookingStatus.CANCELLED
        self._touch()

    def complete(self) -> None:
        """Mark a confirmed stay as completed"""
        if self.status != BookingStatus.CONFIRMED:
            raise ValueError(f"Cannot complete booking with status {self.status.value}")

        self.status = BookingStatus.COMPLETED
        self._touch()

    # ==================== QUERY METHODS ====================
    def is_terminal(self) -> bool:
        return self.status in (BookingStatus.CANCELLED, BookingStatus.COMPLETED)

    def holds_inventory(self) -> bool:
        """Whether this booking takes a unit for its dates"""
        return (
            self.status != BookingStatus.CANCELLED
            and self.payment_status != PaymentStatus.FAILED
        )

    def get_nights(self) -> int:
        return self.date_range.nights()

    def _touch(self) -> None:
        self.updated_at = _utcnow()
        self.version += 1


class BookingHold(BaseModel):
    """Short-lived advisory hold on a villa while the guest pays"""
    hold_id: UUID = Field(default_factory=uuid4)
    villa_id: str
    date_range: DateRange
    session_id: str
    created_at: datetime = Field(default_factory=_utcnow)
    expires_at: datetime

    class Config:
        from_attributes = True

    @staticmethod
    def place(
        villa_id: str,
        date_range: DateRange,
        session_id: str,
        now: datetime,
        duration_minutes: int
    ) -> "BookingHold":
        return BookingHold(
            villa_id=villa_id,
            date_range=date_range,
            session_id=session_id,
            created_at=now,
            expires_at=now + timedelta(minutes=duration_minutes)
        )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SafariEnquiry(BaseModel):
    """Guest enquiry for a safari linked to a booking"""
    enquiry_id: str = Field(default_factory=lambda: f"safari_{int(_utcnow().timestamp() * 1000)}_{_random_suffix(9).lower()}")
    contact: GuestContact
    booking_code: str
    safari_option_id: str
    safari_name: str
    preferred_date: date
    preferred_timing: SafariTiming
    number_of_persons: int = Field(ge=1, le=6)
    special_requirements: str = ""
    status: EnquiryStatus = EnquiryStatus.PENDING
    admin_notes: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    class Config:
        from_attributes = True

    def update_status(self, status: EnquiryStatus, admin_notes: Optional[str] = None) -> None:
        """Move the enquiry along; closed enquiries stay closed"""
        if self.status in (EnquiryStatus.CANCELLED, EnquiryStatus.COMPLETED):
            raise ValueError(f"Cannot update enquiry with status {self.status.value}")
        self.status = status
        if admin_notes is not None:
            self.admin_notes = admin_notes
        self.updated_at = _utcnow()
