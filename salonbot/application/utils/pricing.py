from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from salonbot.domain.entities.catalog import SalonCatalog
from salonbot.domain.entities.price import PriceBreakdown

WEEKEND_MULTIPLIER = Decimal("0.90")
FIRST_BOOKING_MULTIPLIER = Decimal("0.50")
CENTS = Decimal("0.01")


def calculate_price(
    catalog: SalonCatalog,
    services: list[str] | tuple[str, ...],
    appointment_date: date | None,
    is_first_booking: bool = False,
) -> PriceBreakdown:
    """
    Price a selection of services.

    Steps run in a fixed order: combos are collapsed first, the remaining
    services are summed at list price (unknown names count as zero), then the
    weekend discount and finally the first-booking discount are applied. A
    missing date never qualifies for the weekend discount.
    """
    remaining = [s.strip().lower() for s in services]
    total = Decimal("0")

    for combo in catalog.combos:
        if all(member in remaining for member in combo.members):
            total += combo.price
            for member in combo.members:
                remaining.remove(member)

    for service in remaining:
        total += catalog.prices.get(service, Decimal("0"))

    weekend_offer_applied = False
    if appointment_date is not None and appointment_date.weekday() >= 5:
        weekend_offer_applied = True
        total = total * WEEKEND_MULTIPLIER

    first_booking_offer_applied = False
    if is_first_booking:
        first_booking_offer_applied = True
        total = total * FIRST_BOOKING_MULTIPLIER

    return PriceBreakdown(
        final_price=total.quantize(CENTS, rounding=ROUND_HALF_UP),
        weekend_offer_applied=weekend_offer_applied,
        first_booking_offer_applied=first_booking_offer_applied,
    )


def format_price(catalog: SalonCatalog, amount: Decimal) -> str:
    return f"{catalog.currency_symbol}{amount.quantize(CENTS, rounding=ROUND_HALF_UP)}"
