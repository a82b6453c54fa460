from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal

from salonbot.application.utils.date_parser import label_to_hour
from salonbot.domain.entities.appointment import Appointment, AppointmentStatus, AppointmentWithCustomer
from salonbot.domain.entities.user import User


class BookingRepositoryPort(ABC):
    """
    Keyed access to users and appointments.

    Implementations raise StorageError for any failure of the underlying store.
    """

    @abstractmethod
    def get_user(self, phone: str) -> User | None:
        raise NotImplementedError

    @abstractmethod
    def upsert_user(self, phone: str, name: str) -> User:
        raise NotImplementedError

    @abstractmethod
    def create_appointment(
        self,
        customer_phone: str,
        services: tuple[str, ...],
        location: str,
        appointment_date: date,
        appointment_time: str,
        total_price: Decimal,
        status: AppointmentStatus = AppointmentStatus.BOOKED,
    ) -> Appointment:
        raise NotImplementedError

    @abstractmethod
    def get_appointment(self, appointment_id: int) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    def update_appointment(
        self,
        appointment_id: int,
        *,
        services: tuple[str, ...] | None = None,
        location: str | None = None,
        appointment_date: date | None = None,
        appointment_time: str | None = None,
        total_price: Decimal | None = None,
    ) -> Appointment | None:
        """Update only the fields that are not None. Returns None if the id is unknown."""
        raise NotImplementedError

    @abstractmethod
    def delete_appointment(self, appointment_id: int) -> bool:
        """Hard delete. Returns True if a row was removed."""
        raise NotImplementedError

    @abstractmethod
    def cancel_appointment(self, appointment_id: int) -> Appointment | None:
        """Soft delete: set status to cancelled and return the row."""
        raise NotImplementedError

    @abstractmethod
    def list_appointments(self, phone: str, booked_only: bool = False) -> list[Appointment]:
        """Appointments of one subscriber ordered by date, then clock time."""
        raise NotImplementedError

    @abstractmethod
    def has_prior_appointments(
        self,
        phone: str,
        statuses: tuple[AppointmentStatus, ...],
        exclude_id: int | None = None,
    ) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list_all_appointments(self) -> list[AppointmentWithCustomer]:
        """Every appointment with its customer's name, newest first."""
        raise NotImplementedError


def chronological_key(appointment: Appointment) -> tuple[date, int]:
    """Order by calendar date, then by clock hour of the 12-hour label."""
    return (appointment.appointment_date, label_to_hour(appointment.appointment_time))
