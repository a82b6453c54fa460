from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PriceBreakdown:
    final_price: Decimal
    weekend_offer_applied: bool
    first_booking_offer_applied: bool
