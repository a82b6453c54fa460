from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from salonbot.application.use_cases.booking import BookingResult
from salonbot.domain.entities.appointment import Appointment, AppointmentWithCustomer


class ChatRequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    step: str | None = None
    phone: str | None = None
    temp_booking: dict[str, Any] | None = Field(default=None, alias="tempBooking")
    button: str | None = None


class ButtonSchema(BaseModel):
    id: str
    title: str


class ChatResponseSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    reply: str
    next_step: str = Field(alias="nextStep")
    phone: str | None = None
    temp_booking: dict[str, Any] | None = Field(default=None, alias="tempBooking")
    buttons: list[ButtonSchema] = Field(default_factory=list)


class PhoneRequestSchema(BaseModel):
    phone: str


class CheckUserResponseSchema(BaseModel):
    exists: bool
    name: str | None = None


class RegisterRequestSchema(BaseModel):
    phone: str
    name: str


class UserSchema(BaseModel):
    phone: str
    name: str


class RegisterResponseSchema(BaseModel):
    success: bool = True
    user: UserSchema


class BookAppointmentRequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_phone: str
    services: list[str] = Field(min_length=1)
    location: str
    appointment_date: date = Field(alias="date")
    appointment_time: str = Field(alias="time")


class AppointmentSchema(BaseModel):
    appointment_id: int
    customer_phone: str
    customer_name: str | None = None
    services: list[str]
    location: str
    appointment_date: date
    appointment_time: str
    total_price: float
    status: str

    @staticmethod
    def from_entity(appointment: Appointment, customer_name: str | None = None) -> "AppointmentSchema":
        return AppointmentSchema(
            appointment_id=appointment.appointment_id,
            customer_phone=appointment.customer_phone,
            customer_name=customer_name,
            services=list(appointment.services),
            location=appointment.location,
            appointment_date=appointment.appointment_date,
            appointment_time=appointment.appointment_time,
            total_price=float(appointment.total_price),
            status=appointment.status.value,
        )

    @staticmethod
    def from_admin_row(row: AppointmentWithCustomer) -> "AppointmentSchema":
        return AppointmentSchema.from_entity(row.appointment, customer_name=row.customer_name)


class PriceDetailsSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_price: float = Field(alias="totalPrice")
    offer_applied: bool = Field(alias="offerApplied")
    first_booking_offer_applied: bool = Field(alias="firstBookingOfferApplied")


class BookAppointmentResponseSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    appointment: AppointmentSchema
    price_details: PriceDetailsSchema = Field(alias="priceDetails")

    @staticmethod
    def from_result(result: BookingResult) -> "BookAppointmentResponseSchema":
        return BookAppointmentResponseSchema(
            appointment=AppointmentSchema.from_entity(result.appointment),
            price_details=PriceDetailsSchema(
                total_price=float(result.price.final_price),
                offer_applied=result.price.weekend_offer_applied,
                first_booking_offer_applied=result.price.first_booking_offer_applied,
            ),
        )


class GetAppointmentsRequestSchema(BaseModel):
    user_phone: str


class AppointmentListResponseSchema(BaseModel):
    success: bool = True
    appointments: list[AppointmentSchema]


class CancelAppointmentRequestSchema(BaseModel):
    appointment_id: int


class CancelAppointmentResponseSchema(BaseModel):
    success: bool = True
    cancelled_appointment: AppointmentSchema
