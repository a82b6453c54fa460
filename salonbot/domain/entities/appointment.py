from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

SERVICES_SEPARATOR = ", "


class AppointmentStatus(str, Enum):
    BOOKED = "booked"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Appointment:
    appointment_id: int
    customer_phone: str
    services: tuple[str, ...]
    location: str
    appointment_date: date
    appointment_time: str  # 12-hour label, e.g. "4PM"
    total_price: Decimal
    status: AppointmentStatus = AppointmentStatus.BOOKED


@dataclass(frozen=True)
class AppointmentWithCustomer:
    appointment: Appointment
    customer_name: str | None


def join_services(services: tuple[str, ...] | list[str]) -> str:
    """Storage form of the services list: names joined by ``", "``."""
    return SERVICES_SEPARATOR.join(services)


def split_services(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())
