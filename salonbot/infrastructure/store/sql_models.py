"""
SQLAlchemy ORM models for salon users and their appointments.

``services`` is stored as a single ", "-joined string; the domain works with
an ordered tuple and converts at this boundary.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from salonbot.domain.entities.appointment import (
    Appointment,
    AppointmentStatus,
    join_services,
    split_services,
)
from salonbot.domain.entities.user import User


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class SalonUserRow(Base):
    __tablename__ = "salon_users"

    phone: Mapped[str] = mapped_column(String(20), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    def to_entity(self) -> User:
        return User(phone=self.phone, name=self.name)


class AppointmentRow(Base):
    __tablename__ = "appointments"
    __table_args__ = (Index("ix_appointments_user_phone_date", "user_phone", "appointment_date"),)

    appointment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_phone: Mapped[str] = mapped_column(
        "user_phone", String(20), ForeignKey("salon_users.phone"), nullable=False
    )
    services: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(String(100), nullable=False)
    appointment_date: Mapped[date] = mapped_column(Date, nullable=False)
    appointment_time: Mapped[str] = mapped_column(String(10), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=AppointmentStatus.BOOKED.value)

    def to_entity(self) -> Appointment:
        return Appointment(
            appointment_id=self.appointment_id,
            customer_phone=self.customer_phone,
            services=split_services(self.services),
            location=self.location,
            appointment_date=self.appointment_date,
            appointment_time=self.appointment_time,
            total_price=Decimal(self.total_price),
            status=AppointmentStatus(self.status),
        )

    @staticmethod
    def services_column(services: tuple[str, ...]) -> str:
        return join_services(services)
