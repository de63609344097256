"""Application Services - Business use cases"""
import logging
from uuid import UUID
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from domain.repositories import (
    VillaRepository, PackageRepository, SafariOptionRepository, PricingRepository,
    BookingRepository, HoldRepository, SafariEnquiryRepository
)
from domain.entities import (
    Villa, Package, SafariOption, PricingRule, DateOverride,
    Booking, BookingHold, SafariEnquiry
)
from domain.enums import (
    BookingStatus, PaymentStatus, PricingRuleType, EnquiryStatus, SafariTiming
)
from domain.exceptions import AvailabilityError, NotFoundError, StoreUnavailableError, FieldError, ValidationError
from domain.pricing import resolve_nightly_price, compute_booking_totals, round_half_up
from domain.value_objects import DateRange, GuestContact, SafariAddOn, NightlyPrice
from application.validation import (
    BookingDraft, validate_draft, ensure_date_order, validate_dates,
    validate_guests, validate_name, validate_email, validate_phone
)
from infrastructure import config

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CatalogService:
    """Villas, packages and safari options shown in the wizard, plus their admin"""

    def __init__(self,
                 villa_repo: VillaRepository,
                 package_repo: PackageRepository,
                 safari_repo: SafariOptionRepository,
                 booking_repo: BookingRepository):
        self.villa_repo = villa_repo
        self.package_repo = package_repo
        self.safari_repo = safari_repo
        self.booking_repo = booking_repo

    async def get_active_villas(self) -> List[Villa]:
        return await self.villa_repo.find_active()

    async def get_all_villas(self) -> List[Villa]:
        return await self.villa_repo.find_all()

    async def get_villa(self, villa_id: str) -> Optional[Villa]:
        return await self.villa_repo.find_by_id(villa_id)

    async def toggle_villa_status(self, villa_id: str) -> Optional[Villa]:
        villa = await self.villa_repo.find_by_id(villa_id)
        if not villa:
            return None
        new_status = villa.toggle_status()
        logger.info("Villa %s is now %s", villa_id, new_status.value)
        return await self.villa_repo.update(villa)

    async def create_villa(self, villa: Villa) -> Villa:
        if await self.villa_repo.find_by_id(villa.id):
            raise ValueError(f"Villa {villa.id} already exists")
        logger.info("Villa %s created at base price %s", villa.id, villa.base_price)
        return await self.villa_repo.save(villa)

    async def update_villa(
        self,
        villa_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        max_guests: Optional[int] = None,
        amenities: Optional[List[str]] = None,
        images: Optional[List[str]] = None
    ) -> Optional[Villa]:
        villa = await self.villa_repo.find_by_id(villa_id)
        if not villa:
            return None
        villa.update_details(name=name, description=description, max_guests=max_guests,
                             amenities=amenities, images=images)
        logger.info("Villa %s updated", villa_id)
        return await self.villa_repo.update(villa)

    async def update_villa_pricing(self, villa_id: str, base_price: int) -> Optional[Villa]:
        """Change the base price nightly pricing starts from.

        Existing bookings keep the price they were made at.
        """
        villa = await self.villa_repo.find_by_id(villa_id)
        if not villa:
            return None
        villa.update_pricing(base_price)
        logger.info("Villa %s base price set to %s", villa_id, base_price)
        return await self.villa_repo.update(villa)

    async def get_active_packages(self) -> List[Package]:
        return await self.package_repo.find_active()

    async def get_all_packages(self) -> List[Package]:
        return await self.package_repo.find_all()

    async def get_package(self, package_id: str) -> Optional[Package]:
        return await self.package_repo.find_by_id(package_id)

    async def create_package(self, package: Package) -> Package:
        if await self.package_repo.find_by_id(package.id):
            raise ValueError(f"Package {package.id} already exists")
        logger.info("Package %s created at %s per night", package.id, package.price)
        return await self.package_repo.save(package)

    async def update_package(
        self,
        package_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        inclusions: Optional[List[str]] = None,
        price: Optional[int] = None,
        duration: Optional[str] = None
    ) -> Optional[Package]:
        package = await self.package_repo.find_by_id(package_id)
        if not package:
            return None
        package.update_details(name=name, description=description, inclusions=inclusions,
                               price=price, duration=duration)
        logger.info("Package %s updated", package_id)
        return await self.package_repo.update(package)

    async def toggle_package_status(self, package_id: str) -> Optional[Package]:
        package = await self.package_repo.find_by_id(package_id)
        if not package:
            return None
        active = package.toggle_status()
        logger.info("Package %s is now %s", package_id, "active" if active else "inactive")
        return await self.package_repo.update(package)

    async def delete_package(self, package_id: str) -> bool:
        """Delete a package no booking refers to"""
        if not await self.package_repo.find_by_id(package_id):
            return False
        if await self.booking_repo.has_package_bookings(package_id):
            raise ValueError(
                "Cannot delete package with existing bookings. Deactivate it instead."
            )
        logger.info("Package %s deleted", package_id)
        return await self.package_repo.delete(package_id)

    async def get_active_safari_options(self) -> List[SafariOption]:
        return await self.safari_repo.find_active()


class AvailabilityService:
    """Unit availability for villas over a date range"""

    def __init__(self,
                 booking_repo: BookingRepository,
                 villa_repo: VillaRepository,
                 inventory: Optional[Dict[str, int]] = None):
        self.booking_repo = booking_repo
        self.villa_repo = villa_repo
        self.inventory = dict(config.VILLA_INVENTORY if inventory is None else inventory)

    def total_units(self, villa_id: str) -> int:
        return self.inventory.get(villa_id, 1)

    async def count_overlapping(
        self,
        villa_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[UUID] = None
    ) -> int:
        """Bookings that take a unit on any night of [check_in, check_out)"""
        ensure_date_order(check_in, check_out)
        return await self.booking_repo.count_overlapping(
            villa_id, check_in, check_out, exclude_booking_id
        )

    async def get_unit_summary(
        self,
        villa_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[UUID] = None
    ) -> dict:
        """Total, booked and free units for the stay; free units never go below 0"""
        booked = await self.count_overlapping(villa_id, check_in, check_out, exclude_booking_id)
        total = self.total_units(villa_id)
        available = max(0, total - booked)
        logger.debug("Villa %s: %s/%s units available for %s to %s",
                     villa_id, available, total, check_in, check_out)
        return {"total_units": total, "booked_units": booked, "available_units": available}

    async def available_units(
        self,
        villa_id: str,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[UUID] = None
    ) -> int:
        summary = await self.get_unit_summary(villa_id, check_in, check_out, exclude_booking_id)
        return summary["available_units"]

    async def check_availability(self, villa_id: str, check_in: date, check_out: date) -> bool:
        return await self.available_units(villa_id, check_in, check_out) > 0

    async def get_available_villas(self, check_in: date, check_out: date) -> List[dict]:
        """Active villas with at least one free unit, annotated with the count"""
        ensure_date_order(check_in, check_out)
        results = []
        for villa in await self.villa_repo.find_active():
            units = await self.available_units(villa.id, check_in, check_out)
            if units > 0:
                results.append({
                    "villa": villa,
                    "available_units": units,
                    "total_units": self.total_units(villa.id)
                })
        logger.info("Found %s available villas for %s to %s", len(results), check_in, check_out)
        return results


class PricingService:
    """Nightly price resolution and pricing administration"""

    def __init__(self, villa_repo: VillaRepository, pricing_repo: PricingRepository):
        self.villa_repo = villa_repo
        self.pricing_repo = pricing_repo

    async def _get_villa(self, villa_id: str) -> Villa:
        villa = await self.villa_repo.find_by_id(villa_id)
        if not villa:
            raise NotFoundError(f"Villa {villa_id} not found")
        return villa

    async def get_villa_pricing(self, villa_id: str, on_date: date) -> int:
        """Base price, then best rule modifier, then date override"""
        villa = await self._get_villa(villa_id)
        rules = await self.pricing_repo.find_active_rules_for(villa_id, on_date)
        override = await self.pricing_repo.find_override(villa_id, on_date)
        return resolve_nightly_price(villa.base_price, villa_id, on_date, rules, override)

    async def quote_stay(self, villa_id: str, check_in: date, check_out: date) -> List[NightlyPrice]:
        ensure_date_order(check_in, check_out)
        await self._get_villa(villa_id)
        stay = DateRange(check_in=check_in, check_out=check_out)
        return [
            NightlyPrice(night=night, price=await self.get_villa_pricing(villa_id, night))
            for night in stay.each_night()
        ]

    async def create_rule(
        self,
        rule_name: str,
        price_modifier: Decimal,
        start_date: date,
        end_date: date,
        villa_id: str = "all",
        rule_type: PricingRuleType = PricingRuleType.SEASONAL,
        is_active: bool = True
    ) -> PricingRule:
        if end_date < start_date:
            raise ValidationError.single("end_date", "End date cannot be before start date")
        if villa_id != "all":
            await self._get_villa(villa_id)

        rule = PricingRule(
            villa_id=villa_id,
            rule_name=rule_name,
            rule_type=rule_type,
            price_modifier=price_modifier,
            is_active=is_active,
            start_date=start_date,
            end_date=end_date
        )
        logger.info("Pricing rule %s (%s x%s) created for %s",
                    rule_name, rule_type.value, price_modifier, villa_id)
        return await self.pricing_repo.save_rule(rule)

    async def get_rules(self, villa_id: Optional[str] = None) -> List[PricingRule]:
        return await self.pricing_repo.find_rules(villa_id)

    async def toggle_rule(self, rule_id: UUID) -> Optional[PricingRule]:
        rule = await self.pricing_repo.find_rule(rule_id)
        if not rule:
            return None
        rule.is_active = not rule.is_active
        return await self.pricing_repo.update_rule(rule)

    async def delete_rule(self, rule_id: UUID) -> bool:
        return await self.pricing_repo.delete_rule(rule_id)

    async def set_override(self, villa_id: str, on_date: date, price: int, notes: Optional[str] = None) -> DateOverride:
        await self._get_villa(villa_id)
        override = DateOverride(villa_id=villa_id, on_date=on_date, price_override=price, notes=notes)
        logger.info("Price override %s set for %s on %s", price, villa_id, on_date)
        return await self.pricing_repo.save_override(override)

    async def get_overrides(self, villa_id: str) -> List[DateOverride]:
        return await self.pricing_repo.find_overrides(villa_id)

    async def delete_override(self, villa_id: str, on_date: date) -> bool:
        return await self.pricing_repo.delete_override(villa_id, on_date)


class HoldService:
    """Advisory holds placed while a guest completes payment"""

    def __init__(self,
                 hold_repo: HoldRepository,
                 availability: AvailabilityService,
                 clock: Optional[Clock] = None,
                 duration_minutes: Optional[int] = None):
        self.hold_repo = hold_repo
        self.availability = availability
        self.clock = clock or utc_now
        self.duration_minutes = duration_minutes or config.HOLD_DURATION_MINUTES

    async def create_hold(self, villa_id: str, check_in: date, check_out: date, session_id: str) -> BookingHold:
        """Hold a unit unless bookings and other sessions' holds use them all"""
        villa = await self.availability.villa_repo.find_by_id(villa_id)
        if not villa:
            raise NotFoundError(f"Villa {villa_id} not found")

        now = self.clock()
        await self.hold_repo.delete_expired(now)

        available = await self.availability.available_units(villa_id, check_in, check_out)
        others = [
            h for h in await self.hold_repo.find_active_overlapping(villa_id, check_in, check_out, now)
            if h.session_id != session_id
        ]
        if available - len(others) <= 0:
            raise AvailabilityError(f"Villa {villa_id} is not available for {check_in} to {check_out}")

        await self.hold_repo.delete_by_session(session_id)
        hold = BookingHold.place(
            villa_id=villa_id,
            date_range=DateRange(check_in=check_in, check_out=check_out),
            session_id=session_id,
            now=now,
            duration_minutes=self.duration_minutes
        )
        logger.info("Hold placed on %s for session %s until %s", villa_id, session_id, hold.expires_at)
        return await self.hold_repo.save(hold)

    async def release_holds(self, session_id: str) -> int:
        return await self.hold_repo.delete_by_session(session_id)

    async def cleanup_expired_holds(self) -> int:
        removed = await self.hold_repo.delete_expired(self.clock())
        logger.info("Removed %s expired holds", removed)
        return removed


class BookingService:
    """Service for Booking business use cases"""

    def __init__(self,
                 repository: BookingRepository,
                 villa_repo: VillaRepository,
                 package_repo: PackageRepository,
                 safari_repo: SafariOptionRepository,
                 availability: AvailabilityService,
                 hold_repo: Optional[HoldRepository] = None,
                 clock: Optional[Clock] = None,
                 tax_rate: Optional[Decimal] = None):
        self.repository = repository
        self.villa_repo = villa_repo
        self.package_repo = package_repo
        self.safari_repo = safari_repo
        self.availability = availability
        self.hold_repo = hold_repo
        self.clock = clock or utc_now
        self.tax_rate = config.TAX_RATE if tax_rate is None else tax_rate

    async def create_booking(self, draft: BookingDraft) -> Booking:
        """Validate, re-check availability under the villa lock, then persist"""
        now = self.clock()

        villa = await self.villa_repo.find_by_id(draft.villa_id)
        package = await self.package_repo.find_by_id(draft.package_id) if draft.package_id else None
        safari_options = [
            await self.safari_repo.find_by_id(selection.safari_option_id)
            for selection in draft.safari_requests
        ]
        validate_draft(
            draft, villa, package, safari_options,
            today=now.date(),
            max_stay_nights=config.MAX_STAY_NIGHTS,
            max_guests_per_booking=config.MAX_GUESTS_PER_BOOKING
        )

        date_range = DateRange(check_in=draft.check_in, check_out=draft.check_out)
        add_ons = [
            SafariAddOn(
                safari_option_id=option.id,
                safari_name=option.name,
                price=option.price,
                preferred_date=selection.preferred_date,
                preferred_timing=selection.preferred_timing,
                persons=selection.persons
            )
            for selection, option in zip(draft.safari_requests, safari_options)
        ]
        totals = compute_booking_totals(
            nights=date_range.nights(),
            villa_price=villa.base_price,
            package_price=package.price if package else 0,
            safari_prices=[a.price for a in add_ons],
            tax_rate=self.tax_rate
        )

        async with self.repository.villa_lock(villa.id):
            available = await self.availability.available_units(villa.id, draft.check_in, draft.check_out)
            if available <= 0:
                logger.warning("Villa %s sold out for %s to %s at commit time",
                               villa.id, draft.check_in, draft.check_out)
                raise AvailabilityError(
                    f"{villa.name} is no longer available for {draft.check_in} to {draft.check_out}"
                )

            booking = Booking.create(
                booking_code=await self._unique_booking_code(now),
                villa=villa,
                date_range=date_range,
                guests=draft.guests,
                contact=GuestContact(
                    guest_name=draft.guest_name.strip(),
                    email=draft.email.strip().lower(),
                    phone=draft.phone
                ),
                totals=totals,
                package=package,
                safari_requests=add_ons,
                special_requests=draft.special_requests,
                session_id=draft.session_id,
                booking_source=draft.booking_source,
                created_at=now
            )
            saved = await self.repository.save(booking)

        logger.info("Booking %s created for %s (%s to %s), total %s",
                    saved.booking_code, villa.id, draft.check_in, draft.check_out, saved.total_amount)

        if draft.session_id and self.hold_repo is not None:
            try:
                await self.hold_repo.delete_by_session(draft.session_id)
            except StoreUnavailableError:
                # holds expire on their own
                logger.exception("Could not release holds for session %s", draft.session_id)

        return saved

    async def _unique_booking_code(self, now: datetime) -> str:
        code = Booking.generate_booking_code(now)
        while await self.repository.find_by_code(code):
            code = Booking.generate_booking_code(now)
        return code

    async def get_booking(self, booking_id: UUID) -> Optional[Booking]:
        return await self.repository.find_by_id(booking_id)

    async def get_booking_by_code(self, booking_code: str) -> Optional[Booking]:
        return await self.repository.find_by_code(booking_code)

    async def get_bookings(
        self,
        status: Optional[BookingStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        villa_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None
    ) -> List[Booking]:
        return await self.repository.find_all(status, payment_status, villa_id, date_from, date_to)

    async def modify_booking(
        self,
        booking_id: UUID,
        guest_name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        check_in: Optional[date] = None,
        check_out: Optional[date] = None,
        guests: Optional[int] = None,
        special_requests: Optional[str] = None,
        admin_notes: Optional[str] = None
    ) -> Optional[Booking]:
        """Admin edit; changed dates are re-checked against other bookings"""
        booking = await self.repository.find_by_id(booking_id)
        if not booking:
            return None

        errors: List[FieldError] = []
        contact = None
        if guest_name is not None or email is not None or phone is not None:
            contact = GuestContact(
                guest_name=guest_name if guest_name is not None else booking.contact.guest_name,
                email=email if email is not None else booking.contact.email,
                phone=phone if phone is not None else booking.contact.phone
            )
            for check in (validate_name(contact.guest_name), validate_email(contact.email), validate_phone(contact.phone)):
                if check:
                    errors.append(check)

        new_check_in = check_in or booking.date_range.check_in
        new_check_out = check_out or booking.date_range.check_out
        dates_changed = (new_check_in, new_check_out) != (booking.date_range.check_in, booking.date_range.check_out)
        if dates_changed:
            errors.extend(validate_dates(new_check_in, new_check_out, max_nights=config.MAX_STAY_NIGHTS))

        if guests is not None:
            villa = await self.villa_repo.find_by_id(booking.villa_id)
            max_guests = config.MAX_GUESTS_PER_BOOKING
            if villa:
                max_guests = min(villa.max_guests, max_guests)
            guest_error = validate_guests(guests, max_guests)
            if guest_error:
                errors.append(guest_error)

        if errors:
            raise ValidationError(errors)

        if not dates_changed:
            booking.modify(contact=contact, guests=guests,
                           special_requests=special_requests, admin_notes=admin_notes)
            return await self.repository.update(booking)

        async with self.repository.villa_lock(booking.villa_id):
            available = await self.availability.available_units(
                booking.villa_id, new_check_in, new_check_out, exclude_booking_id=booking.booking_id
            )
            if available <= 0:
                raise AvailabilityError(
                    f"{booking.villa_name} is not available for {new_check_in} to {new_check_out}"
                )

            date_range = DateRange(check_in=new_check_in, check_out=new_check_out)
            totals = compute_booking_totals(
                nights=date_range.nights(),
                villa_price=booking.villa_price,
                package_price=booking.package_price,
                safari_prices=[a.price for a in booking.safari_requests],
                tax_rate=self.tax_rate
            )
            booking.modify(contact=contact, date_range=date_range, guests=guests, totals=totals,
                           special_requests=special_requests, admin_notes=admin_notes)
            updated = await self.repository.update(booking)

        logger.info("Booking %s moved to %s - %s", booking.booking_code, new_check_in, new_check_out)
        return updated

    async def _transition(self, booking_id: UUID, action: str, *args) -> Optional[Booking]:
        booking = await self.repository.find_by_id(booking_id)
        if not booking:
            return None

        try:
            getattr(booking, action)(*args)
        except ValueError as e:
            raise ValueError(f"Cannot {action.replace('_', ' ')}: {str(e)}")

        logger.info("Booking %s: %s (status=%s, payment=%s)",
                    booking.booking_code, action, booking.status.value, booking.payment_status.value)
        return await self.repository.update(booking)

    async def confirm_booking(self, booking_id: UUID) -> Optional[Booking]:
        return await self._transition(booking_id, "confirm")

    async def cancel_booking(self, booking_id: UUID) -> Optional[Booking]:
        return await self._transition(booking_id, "cancel")

    async def complete_booking(self, booking_id: UUID) -> Optional[Booking]:
        return await self._transition(booking_id, "complete")

    async def record_payment(self, booking_id: UUID, amount: int, reference: Optional[str] = None) -> Optional[Booking]:
        return await self._transition(booking_id, "record_payment", amount, reference)

    async def mark_payment_failed(self, booking_id: UUID) -> Optional[Booking]:
        return await self._transition(booking_id, "mark_payment_failed")

    async def refund_booking(self, booking_id: UUID) -> Optional[Booking]:
        return await self._transition(booking_id, "refund")

    async def delete_booking(self, booking_id: UUID) -> bool:
        deleted = await self.repository.delete(booking_id)
        if deleted:
            logger.info("Booking %s deleted", booking_id)
        return deleted

    async def get_booking_stats(self) -> dict:
        bookings = await self.repository.find_all()
        paid = [b for b in bookings if b.payment_status == PaymentStatus.PAID]
        revenue = sum(b.total_amount for b in paid)
        average = round_half_up(Decimal(revenue) / len(paid)) if paid else 0

        stats = {
            "total_bookings": len(bookings),
            "total_revenue": revenue,
            "avg_booking_value": average
        }
        for status in BookingStatus:
            stats[f"{status.value}_bookings"] = sum(1 for b in bookings if b.status == status)
        return stats

    async def get_occupancy_stats(self, start_date: date, end_date: date) -> dict:
        """Unit nights sold over [start_date, end_date) across active villas"""
        ensure_date_order(start_date, end_date)
        days = (end_date - start_date).days
        villas = await self.villa_repo.find_active()
        villa_ids = {v.id for v in villas}
        total_unit_nights = sum(self.availability.total_units(v.id) for v in villas) * days

        occupied = sum(
            b.date_range.overlap_nights(start_date, end_date)
            for b in await self.repository.find_all()
            if b.villa_id in villa_ids and b.holds_inventory()
        )
        rate = round(occupied / total_unit_nights * 100, 2) if total_unit_nights else 0.0

        return {
            "start_date": start_date,
            "end_date": end_date,
            "total_villas": len(villas),
            "total_unit_nights": total_unit_nights,
            "occupied_unit_nights": occupied,
            "occupancy_rate": rate
        }


class SafariEnquiryService:
    """Service for safari enquiries raised after booking"""

    def __init__(self,
                 repository: SafariEnquiryRepository,
                 safari_repo: SafariOptionRepository,
                 booking_repo: BookingRepository):
        self.repository = repository
        self.safari_repo = safari_repo
        self.booking_repo = booking_repo

    async def create_enquiry(
        self,
        booking_code: str,
        safari_option_id: str,
        preferred_date: date,
        preferred_timing: SafariTiming,
        number_of_persons: int,
        guest_name: str,
        email: str,
        phone: str,
        special_requirements: str = ""
    ) -> SafariEnquiry:
        errors = [e for e in (validate_name(guest_name), validate_email(email), validate_phone(phone)) if e]

        option = await self.safari_repo.find_by_id(safari_option_id)
        if option is None or not option.is_active:
            errors.append(FieldError(field="safari_option_id", message=f"Safari option {safari_option_id} is not available"))
        elif number_of_persons > option.max_persons:
            errors.append(FieldError(field="number_of_persons", message=f"Maximum {option.max_persons} persons allowed"))

        booking = await self.booking_repo.find_by_code(booking_code)
        if booking is None:
            errors.append(FieldError(field="booking_code", message=f"Booking {booking_code} not found"))

        if errors:
            raise ValidationError(errors)

        enquiry = SafariEnquiry(
            contact=GuestContact(guest_name=guest_name.strip(), email=email.strip().lower(), phone=phone),
            booking_code=booking_code,
            safari_option_id=option.id,
            safari_name=option.name,
            preferred_date=preferred_date,
            preferred_timing=preferred_timing,
            number_of_persons=number_of_persons,
            special_requirements=special_requirements
        )
        logger.info("Safari enquiry %s created for booking %s", enquiry.enquiry_id, booking_code)
        return await self.repository.save(enquiry)

    async def get_enquiry(self, enquiry_id: str) -> Optional[SafariEnquiry]:
        return await self.repository.find_by_id(enquiry_id)

    async def get_enquiries(self, status: Optional[EnquiryStatus] = None) -> List[SafariEnquiry]:
        return await self.repository.find_all(status)

    async def update_status(
        self,
        enquiry_id: str,
        status: EnquiryStatus,
        admin_notes: Optional[str] = None
    ) -> Optional[SafariEnquiry]:
        enquiry = await self.repository.find_by_id(enquiry_id)
        if not enquiry:
            return None

        try:
            enquiry.update_status(status, admin_notes)
        except ValueError as e:
            raise ValueError(f"Cannot update enquiry: {str(e)}")
        return await self.repository.update(enquiry)

    async def get_stats(self) -> Dict[str, int]:
        enquiries = await self.repository.find_all()
        stats = {"total": len(enquiries)}
        for status in EnquiryStatus:
            stats[status.value] = sum(1 for e in enquiries if e.status == status)
        return stats
