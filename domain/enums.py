"""Domain Enums"""
from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    ADVANCE_PAID = "advance_paid"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class VillaStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"


class PricingRuleType(str, Enum):
    SEASONAL = "seasonal"
    WEEKEND = "weekend"
    HOLIDAY = "holiday"
    DEMAND = "demand"


class BookingSource(str, Enum):
    WEBSITE = "website"
    ADMIN = "admin"
    PHONE = "phone"


class SafariTiming(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class EnquiryStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
