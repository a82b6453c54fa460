from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date
from decimal import Decimal

from salonbot.application.ports.booking_repository import BookingRepositoryPort, chronological_key
from salonbot.domain.entities.appointment import Appointment, AppointmentStatus, AppointmentWithCustomer
from salonbot.domain.entities.user import User


class MemoryBookingStore(BookingRepositoryPort):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._appointments: dict[int, Appointment] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def get_user(self, phone: str) -> User | None:
        return self._users.get(phone)

    def upsert_user(self, phone: str, name: str) -> User:
        user = User(phone=phone, name=name)
        self._users[phone] = user
        return user

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
        with self._lock:
            appointment_id = self._next_id
            self._next_id += 1
        appointment = Appointment(
            appointment_id=appointment_id,
            customer_phone=customer_phone,
            services=tuple(services),
            location=location,
            appointment_date=appointment_date,
            appointment_time=appointment_time,
            total_price=total_price,
            status=status,
        )
        self._appointments[appointment_id] = appointment
        return appointment

    def get_appointment(self, appointment_id: int) -> Appointment | None:
        return self._appointments.get(appointment_id)

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
        current = self._appointments.get(appointment_id)
        if current is None:
            return None
        changes = {
            "services": tuple(services) if services is not None else None,
            "location": location,
            "appointment_date": appointment_date,
            "appointment_time": appointment_time,
            "total_price": total_price,
        }
        updated = replace(current, **{k: v for k, v in changes.items() if v is not None})
        self._appointments[appointment_id] = updated
        return updated

    def delete_appointment(self, appointment_id: int) -> bool:
        return self._appointments.pop(appointment_id, None) is not None

    def cancel_appointment(self, appointment_id: int) -> Appointment | None:
        current = self._appointments.get(appointment_id)
        if current is None:
            return None
        cancelled = replace(current, status=AppointmentStatus.CANCELLED)
        self._appointments[appointment_id] = cancelled
        return cancelled

    def list_appointments(self, phone: str, booked_only: bool = False) -> list[Appointment]:
        rows = [
            a
            for a in self._appointments.values()
            if a.customer_phone == phone and (not booked_only or a.status == AppointmentStatus.BOOKED)
        ]
        return sorted(rows, key=chronological_key)

    def has_prior_appointments(
        self,
        phone: str,
        statuses: tuple[AppointmentStatus, ...],
        exclude_id: int | None = None,
    ) -> bool:
        return any(
            a.customer_phone == phone and a.status in statuses and a.appointment_id != exclude_id
            for a in self._appointments.values()
        )

    def list_all_appointments(self) -> list[AppointmentWithCustomer]:
        rows = sorted(self._appointments.values(), key=chronological_key, reverse=True)
        return [
            AppointmentWithCustomer(
                appointment=a,
                customer_name=self._users[a.customer_phone].name if a.customer_phone in self._users else None,
            )
            for a in rows
        ]
