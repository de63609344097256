"""In-Memory Repository Implementations"""
import asyncio
from typing import Optional, List, Dict, Tuple
from uuid import UUID
from datetime import date, datetime

from domain.repositories import (
    VillaRepository, PackageRepository, SafariOptionRepository, PricingRepository,
    BookingRepository, HoldRepository, SafariEnquiryRepository
)
from domain.entities import (
    Villa, Package, SafariOption, PricingRule, DateOverride,
    Booking, BookingHold, SafariEnquiry
)
from domain.enums import BookingStatus, PaymentStatus, EnquiryStatus


class InMemoryVillaRepository(VillaRepository):
    """In-memory implementation of VillaRepository"""

    def __init__(self):
        self._storage: Dict[str, Villa] = {}

    async def save(self, villa: Villa) -> Villa:
        self._storage[villa.id] = villa
        return villa

    async def find_by_id(self, villa_id: str) -> Optional[Villa]:
        return self._storage.get(villa_id)

    async def find_all(self) -> List[Villa]:
        return sorted(self._storage.values(), key=lambda v: v.name)

    async def find_active(self) -> List[Villa]:
        active = [v for v in self._storage.values() if v.is_active]
        return sorted(active, key=lambda v: v.base_price)

    async def update(self, villa: Villa) -> Villa:
        if villa.id in self._storage:
            self._storage[villa.id] = villa
            return villa
        raise ValueError("Villa not found")


class InMemoryPackageRepository(PackageRepository):
    """In-memory implementation of PackageRepository"""

    def __init__(self):
        self._storage: Dict[str, Package] = {}

    async def save(self, package: Package) -> Package:
        self._storage[package.id] = package
        return package

    async def find_by_id(self, package_id: str) -> Optional[Package]:
        return self._storage.get(package_id)

    async def find_all(self) -> List[Package]:
        return sorted(self._storage.values(), key=lambda p: p.price)

    async def find_active(self) -> List[Package]:
        active = [p for p in self._storage.values() if p.is_active]
        return sorted(active, key=lambda p: p.price)

    async def update(self, package: Package) -> Package:
        if package.id in self._storage:
            self._storage[package.id] = package
            return package
        raise ValueError("Package not found")

    async def delete(self, package_id: str) -> bool:
        if package_id in self._storage:
            del self._storage[package_id]
            return True
        return False


class InMemorySafariOptionRepository(SafariOptionRepository):
    """In-memory implementation of SafariOptionRepository"""

    def __init__(self):
        self._storage: Dict[str, SafariOption] = {}

    async def save(self, option: SafariOption) -> SafariOption:
        self._storage[option.id] = option
        return option

    async def find_by_id(self, option_id: str) -> Optional[SafariOption]:
        return self._storage.get(option_id)

    async def find_active(self) -> List[SafariOption]:
        active = [o for o in self._storage.values() if o.is_active]
        return sorted(active, key=lambda o: o.name)


class InMemoryPricingRepository(PricingRepository):
    """In-memory implementation of PricingRepository"""

    def __init__(self):
        self._rules: Dict[UUID, PricingRule] = {}
        self._overrides: Dict[Tuple[str, date], DateOverride] = {}

    async def save_rule(self, rule: PricingRule) -> PricingRule:
        self._rules[rule.rule_id] = rule
        return rule

    async def find_rule(self, rule_id: UUID) -> Optional[PricingRule]:
        return self._rules.get(rule_id)

    async def find_rules(self, villa_id: Optional[str] = None) -> List[PricingRule]:
        rules = list(self._rules.values())
        if villa_id:
            rules = [r for r in rules if r.villa_id in (villa_id, "all")]
        return sorted(rules, key=lambda r: r.start_date)

    async def find_active_rules_for(self, villa_id: str, on_date: date) -> List[PricingRule]:
        return [r for r in self._rules.values() if r.covers(villa_id, on_date)]

    async def update_rule(self, rule: PricingRule) -> PricingRule:
        if rule.rule_id in self._rules:
            self._rules[rule.rule_id] = rule
            return rule
        raise ValueError("Pricing rule not found")

    async def delete_rule(self, rule_id: UUID) -> bool:
        if rule_id in self._rules:
            del self._rules[rule_id]
            return True
        return False

    async def save_override(self, override: DateOverride) -> DateOverride:
        self._overrides[(override.villa_id, override.on_date)] = override
        return override

    async def find_override(self, villa_id: str, on_date: date) -> Optional[DateOverride]:
        return self._overrides.get((villa_id, on_date))

    async def find_overrides(self, villa_id: str) -> List[DateOverride]:
        overrides = [o for (v_id, _), o in self._overrides.items() if v_id == villa_id]
        return sorted(overrides, key=lambda o: o.on_date)

    async def delete_override(self, villa_id: str, on_date: date) -> bool:
        if (villa_id, on_date) in self._overrides:
            del self._overrides[(villa_id, on_date)]
            return True
        return False


class InMemoryBookingRepository(BookingRepository):
    """In-memory implementation of BookingRepository"""

    def __init__(self):
        self._storage: Dict[UUID, Booking] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    async def save(self, booking: Booking) -> Booking:
        existing = await self.find_by_code(booking.booking_code)
        if existing and existing.booking_id != booking.booking_id:
            raise ValueError(f"Booking code {booking.booking_code} already exists")
        self._storage[booking.booking_id] = booking
        return booking

    async def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        return self._storage.get(booking_id)

    async def find_by_code(self, booking_code: str) -> Optional[Booking]:
        for booking in self._storage.values():
            if booking.booking_code == booking_code:
                return booking
        return None

    async def find_all(
        self,
        status: Optional[BookingStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        villa_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None
    ) -> List[Booking]:
        results = list(self._storage.values())
        if status:
            results = [b for b in results if b.status == status]
        if payment_status:
            results = [b for b in results if b.payment_status == payment_status]
        if villa_id:
            results = [b for b in results if b.villa_id == villa_id]
        if date_from:
            results = [b for b in results if b.date_range.check_in >= date_from]
        if date_to:
            results = [b for b in results if b.date_range.check_out <= date_to]
        return sorted(results, key=lambda b: b.created_at, reverse=True)

    async def count_overlapping(
        self,
        villa_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[UUID] = None
    ) -> int:
        return sum(
            1 for b in self._storage.values()
            if b.villa_id == villa_id
            and b.booking_id != exclude_booking_id
            and b.holds_inventory()
            and b.date_range.overlaps(check_in, check_out)
        )

    async def update(self, booking: Booking) -> Booking:
        if booking.booking_id in self._storage:
            self._storage[booking.booking_id] = booking
            return booking
        raise ValueError("Booking not found")

    async def delete(self, booking_id: UUID) -> bool:
        if booking_id in self._storage:
            del self._storage[booking_id]
            return True
        return False

    async def has_package_bookings(self, package_id: str) -> bool:
        return any(b.package_id == package_id for b in self._storage.values())

    def villa_lock(self, villa_id: str) -> asyncio.Lock:
        if villa_id not in self._locks:
            self._locks[villa_id] = asyncio.Lock()
        return self._locks[villa_id]


class InMemoryHoldRepository(HoldRepository):
    """In-memory implementation of HoldRepository"""

    def __init__(self):
        self._storage: Dict[UUID, BookingHold] = {}

    async def save(self, hold: BookingHold) -> BookingHold:
        self._storage[hold.hold_id] = hold
        return hold

    async def find_by_session(self, session_id: str) -> List[BookingHold]:
        return [h for h in self._storage.values() if h.session_id == session_id]

    async def find_active_overlapping(
        self,
        villa_id: str,
        check_in: date,
        check_out: date,
        now: datetime
    ) -> List[BookingHold]:
        return [
            h for h in self._storage.values()
            if h.villa_id == villa_id
            and not h.is_expired(now)
            and h.date_range.overlaps(check_in, check_out)
        ]

    async def delete_by_session(self, session_id: str) -> int:
        doomed = [h.hold_id for h in self._storage.values() if h.session_id == session_id]
        for hold_id in doomed:
            del self._storage[hold_id]
        return len(doomed)

    async def delete_expired(self, now: datetime) -> int:
        doomed = [h.hold_id for h in self._storage.values() if h.is_expired(now)]
        for hold_id in doomed:
            del self._storage[hold_id]
        return len(doomed)


class InMemorySafariEnquiryRepository(SafariEnquiryRepository):
    """In-memory implementation of SafariEnquiryRepository"""

    def __init__(self):
        self._storage: Dict[str, SafariEnquiry] = {}

    async def save(self, enquiry: SafariEnquiry) -> SafariEnquiry:
        self._storage[enquiry.enquiry_id] = enquiry
        return enquiry

    async def find_by_id(self, enquiry_id: str) -> Optional[SafariEnquiry]:
        return self._storage.get(enquiry_id)

    async def find_all(self, status: Optional[EnquiryStatus] = None) -> List[SafariEnquiry]:
        results = list(self._storage.values())
        if status:
            results = [e for e in results if e.status == status]
        return sorted(results, key=lambda e: e.created_at, reverse=True)

    async def update(self, enquiry: SafariEnquiry) -> SafariEnquiry:
        if enquiry.enquiry_id in self._storage:
            self._storage[enquiry.enquiry_id] = enquiry
            return enquiry
        raise ValueError("Safari enquiry not found")
