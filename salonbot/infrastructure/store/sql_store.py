from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Iterator

from sqlalchemy import create_engine, delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from salonbot.application.exceptions import StorageError
from salonbot.application.ports.booking_repository import BookingRepositoryPort, chronological_key
from salonbot.domain.entities.appointment import Appointment, AppointmentStatus, AppointmentWithCustomer
from salonbot.domain.entities.user import User
from salonbot.infrastructure.store.sql_models import AppointmentRow, Base, SalonUserRow


def build_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


class SqlBookingStore(BookingRepositoryPort):
    """Relational store; every driver error surfaces as StorageError."""

    def __init__(self, engine: Engine, create_tables: bool = True) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
        self._logger = logging.getLogger(__name__)
        if create_tables:
            try:
                Base.metadata.create_all(bind=engine)
            except SQLAlchemyError as e:
                raise StorageError(f"Could not create tables: {e}") from e

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            self._logger.error("Database operation failed", extra={"reason": str(e)})
            raise StorageError(str(e)) from e
        finally:
            session.close()

    def get_user(self, phone: str) -> User | None:
        with self._session() as session:
            row = session.get(SalonUserRow, phone)
            return row.to_entity() if row else None

    def upsert_user(self, phone: str, name: str) -> User:
        with self._session() as session:
            row = session.get(SalonUserRow, phone)
            if row is None:
                row = SalonUserRow(phone=phone, name=name)
                session.add(row)
            else:
                row.name = name
            session.flush()
            return row.to_entity()

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
        with self._session() as session:
            row = AppointmentRow(
                customer_phone=customer_phone,
                services=AppointmentRow.services_column(services),
                location=location,
                appointment_date=appointment_date,
                appointment_time=appointment_time,
                total_price=total_price,
                status=status.value,
            )
            session.add(row)
            session.flush()
            return row.to_entity()

    def get_appointment(self, appointment_id: int) -> Appointment | None:
        with self._session() as session:
            row = session.get(AppointmentRow, appointment_id)
            return row.to_entity() if row else None

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
        with self._session() as session:
            row = session.get(AppointmentRow, appointment_id)
            if row is None:
                return None
            if services is not None:
                row.services = AppointmentRow.services_column(services)
            if location is not None:
                row.location = location
            if appointment_date is not None:
                row.appointment_date = appointment_date
            if appointment_time is not None:
                row.appointment_time = appointment_time
            if total_price is not None:
                row.total_price = total_price
            session.flush()
            return row.to_entity()

    def delete_appointment(self, appointment_id: int) -> bool:
        with self._session() as session:
            result = session.execute(delete(AppointmentRow).where(AppointmentRow.appointment_id == appointment_id))
            return result.rowcount > 0

    def cancel_appointment(self, appointment_id: int) -> Appointment | None:
        with self._session() as session:
            row = session.get(AppointmentRow, appointment_id)
            if row is None:
                return None
            row.status = AppointmentStatus.CANCELLED.value
            session.flush()
            return row.to_entity()

    def list_appointments(self, phone: str, booked_only: bool = False) -> list[Appointment]:
        with self._session() as session:
            stmt = select(AppointmentRow).where(AppointmentRow.customer_phone == phone)
            if booked_only:
                stmt = stmt.where(AppointmentRow.status == AppointmentStatus.BOOKED.value)
            stmt = stmt.order_by(AppointmentRow.appointment_date, AppointmentRow.appointment_id)
            rows = [row.to_entity() for row in session.scalars(stmt)]
        # Stored times are 12-hour labels, which do not sort as text.
        return sorted(rows, key=chronological_key)

    def has_prior_appointments(
        self,
        phone: str,
        statuses: tuple[AppointmentStatus, ...],
        exclude_id: int | None = None,
    ) -> bool:
        with self._session() as session:
            stmt = select(AppointmentRow.appointment_id).where(
                AppointmentRow.customer_phone == phone,
                AppointmentRow.status.in_([s.value for s in statuses]),
            )
            if exclude_id is not None:
                stmt = stmt.where(AppointmentRow.appointment_id != exclude_id)
            return session.execute(stmt.limit(1)).first() is not None

    def list_all_appointments(self) -> list[AppointmentWithCustomer]:
        with self._session() as session:
            stmt = select(AppointmentRow, SalonUserRow.name).outerjoin(
                SalonUserRow, AppointmentRow.customer_phone == SalonUserRow.phone
            )
            rows = [
                AppointmentWithCustomer(appointment=row.to_entity(), customer_name=name)
                for row, name in session.execute(stmt)
            ]
        return sorted(rows, key=lambda r: chronological_key(r.appointment), reverse=True)
