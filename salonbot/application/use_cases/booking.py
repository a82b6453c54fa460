from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from salonbot.application.ports.booking_repository import BookingRepositoryPort
from salonbot.application.utils.pricing import calculate_price
from salonbot.domain.entities.appointment import Appointment, AppointmentStatus, AppointmentWithCustomer
from salonbot.domain.entities.catalog import SalonCatalog
from salonbot.domain.entities.price import PriceBreakdown
from salonbot.domain.entities.user import User


@dataclass(frozen=True)
class BookingResult:
    appointment: Appointment
    price: PriceBreakdown


class BookingUseCase:
    """Appointment operations shared by the chat flow and the REST routes."""

    def __init__(
        self,
        repository: BookingRepositoryPort,
        catalog: SalonCatalog,
        first_booking_offer_enabled: bool = True,
        first_booking_counts_cancelled: bool = True,
    ) -> None:
        self._repository = repository
        self._catalog = catalog
        self._first_booking_offer_enabled = first_booking_offer_enabled
        self._first_booking_counts_cancelled = first_booking_counts_cancelled
        self._logger = logging.getLogger(__name__)

    def is_first_booking(self, phone: str, exclude_id: int | None = None) -> bool:
        """
        A subscriber qualifies when no earlier appointment row exists for them.

        Cancelled rows count as earlier bookings unless configured otherwise.
        ``exclude_id`` leaves out the appointment being modified, so a
        subscriber editing their only booking keeps the offer.
        """
        if not self._first_booking_offer_enabled:
            return False
        statuses: tuple[AppointmentStatus, ...] = (AppointmentStatus.BOOKED,)
        if self._first_booking_counts_cancelled:
            statuses = (AppointmentStatus.BOOKED, AppointmentStatus.CANCELLED)
        return not self._repository.has_prior_appointments(phone, statuses, exclude_id=exclude_id)

    def quote(
        self,
        phone: str,
        services: tuple[str, ...] | list[str],
        appointment_date: date | None,
        exclude_id: int | None = None,
    ) -> PriceBreakdown:
        return calculate_price(
            self._catalog,
            services,
            appointment_date,
            is_first_booking=self.is_first_booking(phone, exclude_id=exclude_id),
        )

    def book(
        self,
        phone: str,
        services: tuple[str, ...] | list[str],
        location: str,
        appointment_date: date,
        appointment_time: str,
    ) -> BookingResult:
        normalized = tuple(s.strip().lower() for s in services if s and s.strip())
        price = self.quote(phone, normalized, appointment_date)
        appointment = self._repository.create_appointment(
            customer_phone=phone,
            services=normalized,
            location=location,
            appointment_date=appointment_date,
            appointment_time=appointment_time,
            total_price=price.final_price,
        )
        self._logger.info(
            "Appointment booked",
            extra={"phone": phone, "appointment_id": appointment.appointment_id},
        )
        return BookingResult(appointment=appointment, price=price)

    def check_user(self, phone: str) -> User | None:
        return self._repository.get_user(phone)

    def register_user(self, phone: str, name: str) -> User:
        return self._repository.upsert_user(phone, name)

    def list_upcoming(self, phone: str) -> list[Appointment]:
        return self._repository.list_appointments(phone, booked_only=True)

    def cancel(self, appointment_id: int) -> Appointment | None:
        cancelled = self._repository.cancel_appointment(appointment_id)
        if cancelled is not None:
            self._logger.info("Appointment cancelled", extra={"appointment_id": appointment_id})
        return cancelled

    def list_all(self) -> list[AppointmentWithCustomer]:
        return self._repository.list_all_appointments()
