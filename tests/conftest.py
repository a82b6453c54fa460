from __future__ import annotations

from datetime import date
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from salonbot.application.use_cases.booking import BookingUseCase
from salonbot.application.use_cases.handle_turn import HandleTurnUseCase
from salonbot.application.utils.state_codec import session_from_payload, temp_booking_to_payload
from salonbot.domain.entities.turn import TurnInput, TurnResult
from salonbot.infrastructure.catalog.catalog_data import DEFAULT_CATALOG
from salonbot.infrastructure.store.memory_store import MemoryBookingStore

# Monday; the following Saturday is 2025-06-07.
TODAY = date(2025, 6, 2)
SATURDAY = date(2025, 6, 7)
UTC = ZoneInfo("UTC")
PHONE = "9876543210"


def make_engine(store, first_booking_offer_enabled=True, first_booking_counts_cancelled=True) -> HandleTurnUseCase:
    booking = BookingUseCase(
        repository=store,
        catalog=DEFAULT_CATALOG,
        first_booking_offer_enabled=first_booking_offer_enabled,
        first_booking_counts_cancelled=first_booking_counts_cancelled,
    )
    return HandleTurnUseCase(
        repository=store,
        catalog=DEFAULT_CATALOG,
        booking=booking,
        timezone=UTC,
        today=lambda: TODAY,
    )


def send(engine: HandleTurnUseCase, text: str, previous: TurnResult | None = None, button: str | None = None) -> TurnResult:
    """Run one turn, echoing the previous result's state through the wire codec like a real caller."""
    if previous is None:
        state = session_from_payload(step=None, phone=None, temp_booking=None)
    else:
        state = session_from_payload(
            step=previous.next_step.value,
            phone=previous.phone,
            temp_booking=temp_booking_to_payload(previous.temp_booking),
        )
    return engine.execute(TurnInput(text=text, state=state, button=button))


def seed_appointment(store, phone=PHONE, services=("haircut",), location="Koramangala",
                     appointment_date=date(2025, 6, 5), appointment_time="4PM", total_price="500.00"):
    return store.create_appointment(
        customer_phone=phone,
        services=services,
        location=location,
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        total_price=Decimal(total_price),
    )


@pytest.fixture
def store() -> MemoryBookingStore:
    return MemoryBookingStore()


@pytest.fixture
def engine(store) -> HandleTurnUseCase:
    return make_engine(store)


@pytest.fixture
def main_menu(engine, store) -> TurnResult:
    """A registered subscriber sitting at the main menu."""
    store.upsert_user(PHONE, "Priya")
    return send(engine, PHONE)
