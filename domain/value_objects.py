"""Domain Value Objects"""
from pydantic import BaseModel, Field, validator
from datetime import date, timedelta
from typing import List, Optional

from domain.enums import SafariTiming


class DateRange(BaseModel):
    """Value Object for a stay, half-open [check_in, check_out)"""
    check_in: date
    check_out: date

    @validator('check_out')
    def check_out_after_check_in(cls, v, values):
        if 'check_in' in values and v <= values['check_in']:
            raise ValueError('Check-out must be after check-in')
        return v

    def nights(self) -> int:
        """Calculate number of nights"""
        return (self.check_out - self.check_in).days

    def each_night(self) -> List[date]:
        """Dates of every night in the stay"""
        return [self.check_in + timedelta(days=i) for i in range(self.nights())]

    def overlaps(self, check_in: date, check_out: date) -> bool:
        """Half-open intersection; same-day turnover does not overlap"""
        return self.check_in < check_out and self.check_out > check_in

    def overlap_nights(self, start: date, end: date) -> int:
        """Number of nights shared with [start, end)"""
        first = max(self.check_in, start)
        last = min(self.check_out, end)
        return max(0, (last - first).days)

    class Config:
        frozen = True


class GuestContact(BaseModel):
    """Value Object for the lead guest's contact details"""
    guest_name: str
    email: str
    phone: str

    class Config:
        frozen = True


class SafariAddOn(BaseModel):
    """Safari request attached to a booking, with its flat price at booking time"""
    safari_option_id: str
    safari_name: str
    price: int = Field(ge=0)
    preferred_date: Optional[date] = None
    preferred_timing: Optional[SafariTiming] = None
    persons: int = Field(ge=1, le=6, default=1)

    class Config:
        frozen = True


class BookingTotals(BaseModel):
    """Derived amounts for a booking"""
    nights: int
    villa_total: int
    package_total: int
    safari_total: int
    subtotal: int
    taxes: int
    total_amount: int

    class Config:
        frozen = True


class NightlyPrice(BaseModel):
    """Resolved price for one night of a stay"""
    night: date
    price: int

    class Config:
        frozen = True
