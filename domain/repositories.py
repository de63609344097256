"""Domain Repository Interfaces

Implementations raise StoreUnavailableError when the backing store cannot
be reached; services let it propagate.
"""
from abc import ABC, abstractmethod
from typing import Optional, List, AsyncContextManager
from uuid import UUID
from datetime import date, datetime

from domain.entities import (
    Villa, Package, SafariOption, PricingRule, DateOverride,
    Booking, BookingHold, SafariEnquiry
)
from domain.enums import BookingStatus, PaymentStatus, EnquiryStatus


class VillaRepository(ABC):
    """Repository interface for villas"""

    @abstractmethod
    async def save(self, villa: Villa) -> Villa:
        pass

    @abstractmethod
    async def find_by_id(self, villa_id: str) -> Optional[Villa]:
        pass

    @abstractmethod
    async def find_all(self) -> List[Villa]:
        """All villas ordered by name"""
        pass

    @abstractmethod
    async def find_active(self) -> List[Villa]:
        """Active villas ordered by base price"""
        pass

    @abstractmethod
    async def update(self, villa: Villa) -> Villa:
        pass


class PackageRepository(ABC):
    """Repository interface for packages"""

    @abstractmethod
    async def save(self, package: Package) -> Package:
        pass

    @abstractmethod
    async def find_by_id(self, package_id: str) -> Optional[Package]:
        pass

    @abstractmethod
    async def find_all(self) -> List[Package]:
        """All packages ordered by price"""
        pass

    @abstractmethod
    async def find_active(self) -> List[Package]:
        """Active packages ordered by price"""
        pass

    @abstractmethod
    async def update(self, package: Package) -> Package:
        pass

    @abstractmethod
    async def delete(self, package_id: str) -> bool:
        pass


class SafariOptionRepository(ABC):
    """Repository interface for safari options"""

    @abstractmethod
    async def save(self, option: SafariOption) -> SafariOption:
        pass

    @abstractmethod
    async def find_by_id(self, option_id: str) -> Optional[SafariOption]:
        pass

    @abstractmethod
    async def find_active(self) -> List[SafariOption]:
        pass


class PricingRepository(ABC):
    """Repository interface for pricing rules and date overrides"""

    @abstractmethod
    async def save_rule(self, rule: PricingRule) -> PricingRule:
        pass

    @abstractmethod
    async def find_rule(self, rule_id: UUID) -> Optional[PricingRule]:
        pass

    @abstractmethod
    async def find_rules(self, villa_id: Optional[str] = None) -> List[PricingRule]:
        """All rules, optionally those targeting one villa or all villas"""
        pass

    @abstractmethod
    async def find_active_rules_for(self, villa_id: str, on_date: date) -> List[PricingRule]:
        """Active rules for the villa (or all villas) whose range contains the date"""
        pass

    @abstractmethod
    async def update_rule(self, rule: PricingRule) -> PricingRule:
        pass

    @abstractmethod
    async def delete_rule(self, rule_id: UUID) -> bool:
        pass

    @abstractmethod
    async def save_override(self, override: DateOverride) -> DateOverride:
        """Insert or replace the override for (villa, date)"""
        pass

    @abstractmethod
    async def find_override(self, villa_id: str, on_date: date) -> Optional[DateOverride]:
        pass

    @abstractmethod
    async def find_overrides(self, villa_id: str) -> List[DateOverride]:
        pass

    @abstractmethod
    async def delete_override(self, villa_id: str, on_date: date) -> bool:
        pass


class BookingRepository(ABC):
    """Repository interface for Booking Aggregate"""

    @abstractmethod
    async def save(self, booking: Booking) -> Booking:
        """Insert booking; booking codes are unique"""
        pass

    @abstractmethod
    async def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def find_by_code(self, booking_code: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def find_all(
        self,
        status: Optional[BookingStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        villa_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None
    ) -> List[Booking]:
        """Bookings newest first; date_from/date_to bound the stay dates"""
        pass

    @abstractmethod
    async def count_overlapping(
        self,
        villa_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[UUID] = None
    ) -> int:
        """Bookings holding inventory whose [check_in, check_out) intersects the range"""
        pass

    @abstractmethod
    async def update(self, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def delete(self, booking_id: UUID) -> bool:
        pass

    @abstractmethod
    async def has_package_bookings(self, package_id: str) -> bool:
        """Whether any booking, in any status, references the package"""
        pass

    @abstractmethod
    def villa_lock(self, villa_id: str) -> AsyncContextManager:
        """Serialises availability re-check and write for one villa"""
        pass


class HoldRepository(ABC):
    """Repository interface for booking holds"""

    @abstractmethod
    async def save(self, hold: BookingHold) -> BookingHold:
        pass

    @abstractmethod
    async def find_by_session(self, session_id: str) -> List[BookingHold]:
        pass

    @abstractmethod
    async def find_active_overlapping(
        self,
        villa_id: str,
        check_in: date,
        check_out: date,
        now: datetime
    ) -> List[BookingHold]:
        pass

    @abstractmethod
    async def delete_by_session(self, session_id: str) -> int:
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        pass


class SafariEnquiryRepository(ABC):
    """Repository interface for safari enquiries"""

    @abstractmethod
    async def save(self, enquiry: SafariEnquiry) -> SafariEnquiry:
        pass

    @abstractmethod
    async def find_by_id(self, enquiry_id: str) -> Optional[SafariEnquiry]:
        pass

    @abstractmethod
    async def find_all(self, status: Optional[EnquiryStatus] = None) -> List[SafariEnquiry]:
        """Enquiries newest first"""
        pass

    @abstractmethod
    async def update(self, enquiry: SafariEnquiry) -> SafariEnquiry:
        pass
