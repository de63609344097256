"""API Schemas - Request and Response DTOs"""
from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from typing import List, Optional

from domain.enums import (
    PricingRuleType, BookingSource, SafariTiming, EnquiryStatus
)


# ============================================================================
# CATALOGUE SCHEMAS
# ============================================================================

class VillaResponse(BaseModel):
    """Villa response DTO"""
    id: str
    name: str
    description: str
    base_price: int
    max_guests: int
    status: str
    amenities: List[str]
    images: List[str]
    total_units: int


class CreateVillaRequest(BaseModel):
    """Create villa request DTO"""
    id: str = Field(min_length=1, pattern=r"^[a-z0-9-]+$")
    name: str = Field(min_length=1)
    description: str = ""
    base_price: int = Field(gt=0)
    max_guests: int = Field(ge=1)
    amenities: List[str] = []
    images: List[str] = []


class UpdateVillaRequest(BaseModel):
    """Update villa request DTO"""
    name: Optional[str] = None
    description: Optional[str] = None
    max_guests: Optional[int] = Field(ge=1, default=None)
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None


class UpdateVillaPricingRequest(BaseModel):
    """Update villa base price request DTO"""
    base_price: int = Field(gt=0)


class PackageResponse(BaseModel):
    """Package response DTO"""
    id: str
    name: str
    description: str
    inclusions: List[str]
    price: int
    duration: str
    is_active: bool


class CreatePackageRequest(BaseModel):
    """Create package request DTO"""
    id: str = Field(min_length=1, pattern=r"^[a-z0-9-]+$")
    name: str = Field(min_length=1)
    description: str = ""
    inclusions: List[str] = []
    price: int = Field(ge=0)
    duration: str = "Per night"
    is_active: bool = True


class UpdatePackageRequest(BaseModel):
    """Update package request DTO"""
    name: Optional[str] = None
    description: Optional[str] = None
    inclusions: Optional[List[str]] = None
    price: Optional[int] = Field(ge=0, default=None)
    duration: Optional[str] = None


class SafariOptionResponse(BaseModel):
    """Safari option response DTO"""
    id: str
    name: str
    description: str
    duration: str
    price: int
    max_persons: int
    timings: List[str]
    highlights: List[str]


# ============================================================================
# AVAILABILITY SCHEMAS
# ============================================================================

class AvailabilityResponse(BaseModel):
    """Availability response DTO"""
    villa_id: str
    check_in: date
    check_out: date
    total_units: int
    booked_units: int
    available_units: int
    available: bool


class AvailableVillaResponse(BaseModel):
    """Available villa response DTO"""
    villa: VillaResponse
    available_units: int


# ============================================================================
# PRICING SCHEMAS
# ============================================================================

class NightlyPriceResponse(BaseModel):
    """Nightly price response DTO"""
    villa_id: str
    on_date: date
    price: int
    currency: str


class QuoteNightResponse(BaseModel):
    night: date
    price: int


class QuoteResponse(BaseModel):
    """Stay quote response DTO"""
    villa_id: str
    check_in: date
    check_out: date
    nights: List[QuoteNightResponse]
    total: int
    currency: str


class CreatePricingRuleRequest(BaseModel):
    """Create pricing rule request DTO"""
    villa_id: str = "all"
    rule_name: str = Field(min_length=1)
    rule_type: PricingRuleType = PricingRuleType.SEASONAL
    price_modifier: Decimal = Field(gt=0)
    start_date: date
    end_date: date
    is_active: bool = True


class PricingRuleResponse(BaseModel):
    """Pricing rule response DTO"""
    rule_id: UUID
    villa_id: str
    rule_name: str
    rule_type: str
    price_modifier: Decimal
    is_active: bool
    start_date: date
    end_date: date
    created_at: datetime


class SetDateOverrideRequest(BaseModel):
    """Set date override request DTO"""
    villa_id: str
    on_date: date
    price_override: int = Field(gt=0)
    notes: Optional[str] = None


class DateOverrideResponse(BaseModel):
    """Date override response DTO"""
    villa_id: str
    on_date: date
    price_override: int
    notes: Optional[str] = None


# ============================================================================
# HOLD SCHEMAS
# ============================================================================

class CreateHoldRequest(BaseModel):
    """Create hold request DTO"""
    villa_id: str
    check_in: date
    check_out: date
    session_id: str = Field(min_length=1)


class HoldResponse(BaseModel):
    """Hold response DTO"""
    hold_id: UUID
    villa_id: str
    check_in: date
    check_out: date
    session_id: str
    created_at: datetime
    expires_at: datetime


# ============================================================================
# BOOKING SCHEMAS
# ============================================================================

class SafariRequestRequest(BaseModel):
    """Safari request request DTO"""
    safari_option_id: str
    preferred_date: Optional[date] = None
    preferred_timing: Optional[SafariTiming] = None
    persons: int = Field(ge=1, le=6, default=1)


class CreateBookingRequest(BaseModel):
    """Create booking request DTO"""
    villa_id: str
    check_in: date
    check_out: date
    guests: int
    package_id: Optional[str] = None
    safari_requests: List[SafariRequestRequest] = []
    guest_name: str
    email: str
    phone: str
    special_requests: Optional[str] = None
    session_id: Optional[str] = None
    booking_source: BookingSource = Field(default=BookingSource.WEBSITE, description="Source of booking")


class ModifyBookingRequest(BaseModel):
    """Modify booking request DTO"""
    guest_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    guests: Optional[int] = None
    special_requests: Optional[str] = None
    admin_notes: Optional[str] = None


class RecordPaymentRequest(BaseModel):
    """Record payment request DTO"""
    amount: int = Field(gt=0)
    reference: Optional[str] = None


class SafariRequestResponse(BaseModel):
    """Safari request response DTO"""
    safari_option_id: str
    safari_name: str
    price: int
    preferred_date: Optional[date] = None
    preferred_timing: Optional[str] = None
    persons: int


class BookingResponse(BaseModel):
    """Booking response DTO"""
    booking_id: UUID
    booking_code: str
    villa_id: str
    villa_name: str
    villa_price: int
    check_in: date
    check_out: date
    nights: int
    guests: int
    package_id: Optional[str] = None
    package_name: Optional[str] = None
    package_price: int
    safari_requests: List[SafariRequestResponse]
    safari_total: int
    subtotal: int
    taxes: int
    total_amount: int
    advance_amount: int
    remaining_amount: int
    currency: str
    status: str
    payment_status: str
    payment_reference: Optional[str] = None
    guest_name: str
    email: str
    phone: str
    special_requests: Optional[str] = None
    admin_notes: Optional[str] = None
    booking_source: str
    created_at: datetime
    updated_at: datetime
    version: int


class BookingStatsResponse(BaseModel):
    """Booking statistics response DTO"""
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    cancelled_bookings: int
    completed_bookings: int
    total_revenue: int
    avg_booking_value: int


class OccupancyStatsResponse(BaseModel):
    """Occupancy statistics response DTO"""
    start_date: date
    end_date: date
    total_villas: int
    total_unit_nights: int
    occupied_unit_nights: int
    occupancy_rate: float


# ============================================================================
# SAFARI ENQUIRY SCHEMAS
# ============================================================================

class CreateSafariEnquiryRequest(BaseModel):
    """Create safari enquiry request DTO"""
    booking_code: str
    safari_option_id: str
    preferred_date: date
    preferred_timing: SafariTiming
    number_of_persons: int = Field(ge=1, le=6)
    guest_name: str
    email: str
    phone: str
    special_requirements: str = ""


class UpdateEnquiryStatusRequest(BaseModel):
    """Update enquiry status request DTO"""
    status: EnquiryStatus
    admin_notes: Optional[str] = None


class SafariEnquiryResponse(BaseModel):
    """Safari enquiry response DTO"""
    enquiry_id: str
    booking_code: str
    safari_option_id: str
    safari_name: str
    preferred_date: date
    preferred_timing: str
    number_of_persons: int
    special_requirements: str
    guest_name: str
    email: str
    phone: str
    status: str
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EnquiryStatsResponse(BaseModel):
    total: int
    pending: int
    confirmed: int
    cancelled: int
    completed: int


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class Token(BaseModel):
    """Token response DTO"""
    access_token: str
    token_type: str

class TokenData(BaseModel):
    """Token payload DTO"""
    username: Optional[str] = None

class UserResponse(BaseModel):
    """User response DTO"""
    user_id: UUID
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: str
    disabled: bool
