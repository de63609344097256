"""Pricing - pure functions over pricing rules and booking amounts

Nightly price resolution layers three sources:

1. the villa's base price,
2. the highest modifier among the active rules covering the date
   (overlapping rules never stack),
3. an explicit per-date override, which always wins.
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from domain.entities import PricingRule, DateOverride
from domain.value_objects import BookingTotals


def round_half_up(value: Decimal) -> int:
    """Round to the nearest whole currency unit, halves away from zero"""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def applicable_modifier(rules: Iterable[PricingRule], villa_id: str, on_date: date) -> Optional[Decimal]:
    """Largest modifier among rules covering the villa on the date, or None"""
    modifiers = [rule.price_modifier for rule in rules if rule.covers(villa_id, on_date)]
    if not modifiers:
        return None
    return max(modifiers)


def resolve_nightly_price(
    base_price: int,
    villa_id: str,
    on_date: date,
    rules: Iterable[PricingRule],
    override: Optional[DateOverride] = None
) -> int:
    """Price for one night of a villa"""
    if override is not None and override.villa_id == villa_id and override.on_date == on_date:
        return override.price_override

    modifier = applicable_modifier(rules, villa_id, on_date)
    if modifier is None:
        return base_price
    return round_half_up(Decimal(base_price) * modifier)


def compute_booking_totals(
    nights: int,
    villa_price: int,
    package_price: int,
    safari_prices: List[int],
    tax_rate: Decimal
) -> BookingTotals:
    """subtotal = nights * (villa + package) + safaris; total = subtotal + taxes"""
    villa_total = nights * villa_price
    package_total = nights * package_price
    safari_total = sum(safari_prices)
    subtotal = villa_total + package_total + safari_total
    taxes = round_half_up(Decimal(subtotal) * Decimal(str(tax_rate)))

    return BookingTotals(
        nights=nights,
        villa_total=villa_total,
        package_total=package_total,
        safari_total=safari_total,
        subtotal=subtotal,
        taxes=taxes,
        total_amount=subtotal + taxes
    )
