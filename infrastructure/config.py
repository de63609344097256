"""Application configuration read from the environment"""
import os
from decimal import Decimal
from typing import Dict


def _env_or(key: str, default: str) -> str:
    v = os.getenv(key)
    return v if v is not None else default


def _env_flag(key: str, default: bool) -> bool:
    return _env_or(key, "true" if default else "false").lower() in ("1", "true", "yes", "on")


# Security
SECRET_KEY = _env_or("SECRET_KEY", "change-me-villa-booking-secret")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(_env_or("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

ADMIN_USERNAME = _env_or("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = _env_or("ADMIN_PASSWORD", "admin123")
ADMIN_EMAIL = _env_or("ADMIN_EMAIL", "admin@example.com")

# Booking rules
TAX_RATE = Decimal(_env_or("TAX_RATE", "0.18"))
CURRENCY = _env_or("CURRENCY", "INR")
HOLD_DURATION_MINUTES = int(_env_or("HOLD_DURATION_MINUTES", "15"))
MAX_STAY_NIGHTS = int(_env_or("MAX_STAY_NIGHTS", "30"))
MAX_GUESTS_PER_BOOKING = int(_env_or("MAX_GUESTS_PER_BOOKING", "12"))

# Units per villa type; villas not listed have a single unit
VILLA_INVENTORY: Dict[str, int] = {
    "glass-cottage": 14,
    "hornbill-villa": 4,
    "kingfisher-villa": 4,
}

LOG_LEVEL = _env_or("LOG_LEVEL", "INFO").upper()
SEED_DEMO_DATA = _env_flag("SEED_DEMO_DATA", True)
