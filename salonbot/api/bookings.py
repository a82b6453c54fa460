import logging

from fastapi import APIRouter, Depends, HTTPException

from salonbot.api.schemas import (
    AppointmentListResponseSchema,
    AppointmentSchema,
    BookAppointmentRequestSchema,
    BookAppointmentResponseSchema,
    CancelAppointmentRequestSchema,
    CancelAppointmentResponseSchema,
    CheckUserResponseSchema,
    GetAppointmentsRequestSchema,
    PhoneRequestSchema,
    RegisterRequestSchema,
    RegisterResponseSchema,
    UserSchema,
)
from salonbot.application.exceptions import StorageError
from salonbot.application.use_cases.booking import BookingUseCase
from salonbot.application.utils.date_parser import parse_time
from salonbot.application.utils.message_rules import normalize_phone
from salonbot.domain.entities.catalog import SalonCatalog
from salonbot.wiring.dependencies import get_booking_use_case, get_catalog

router = APIRouter()
logger = logging.getLogger(__name__)


def _require_phone(value: str) -> str:
    phone = normalize_phone(value)
    if not phone:
        raise HTTPException(status_code=400, detail="Phone number must have 10 digits")
    return phone


@router.post("/check-user", response_model=CheckUserResponseSchema, response_model_exclude_none=True)
def check_user(
    req: PhoneRequestSchema,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    phone = _require_phone(req.phone)
    try:
        user = uc.check_user(phone)
    except StorageError:
        logger.exception("Check user failed", extra={"phone": phone})
        raise HTTPException(status_code=500, detail="Database error")
    if user is None:
        return CheckUserResponseSchema(exists=False)
    return CheckUserResponseSchema(exists=True, name=user.name)


@router.post("/register", response_model=RegisterResponseSchema)
def register(
    req: RegisterRequestSchema,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    phone = _require_phone(req.phone)
    name = " ".join(req.name.split())
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")
    try:
        user = uc.register_user(phone, name)
    except StorageError:
        logger.exception("Register failed", extra={"phone": phone})
        raise HTTPException(status_code=500, detail="Registration failed")
    return RegisterResponseSchema(user=UserSchema(phone=user.phone, name=user.name))


@router.post("/book-appointment", response_model=BookAppointmentResponseSchema)
def book_appointment(
    req: BookAppointmentRequestSchema,
    uc: BookingUseCase = Depends(get_booking_use_case),
    catalog: SalonCatalog = Depends(get_catalog),
):
    phone = _require_phone(req.user_phone)
    location = catalog.resolve_branch(req.location)
    if location is None:
        raise HTTPException(status_code=400, detail=f"Unknown branch: {req.location}")
    slot = parse_time(req.appointment_time)
    if slot is None:
        raise HTTPException(status_code=400, detail="Time must be between 10AM and 10PM")

    try:
        result = uc.book(
            phone=phone,
            services=req.services,
            location=location,
            appointment_date=req.appointment_date,
            appointment_time=slot.label,
        )
    except StorageError:
        logger.exception("Booking failed", extra={"phone": phone})
        raise HTTPException(status_code=500, detail="Booking failed")
    return BookAppointmentResponseSchema.from_result(result)


@router.post("/get-appointments", response_model=AppointmentListResponseSchema)
def get_appointments(
    req: GetAppointmentsRequestSchema,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    phone = _require_phone(req.user_phone)
    try:
        appointments = uc.list_upcoming(phone)
    except StorageError:
        logger.exception("Get appointments failed", extra={"phone": phone})
        raise HTTPException(status_code=500, detail="Database error")
    return AppointmentListResponseSchema(appointments=[AppointmentSchema.from_entity(a) for a in appointments])


@router.post("/cancel-appointment", response_model=CancelAppointmentResponseSchema)
def cancel_appointment(
    req: CancelAppointmentRequestSchema,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        cancelled = uc.cancel(req.appointment_id)
    except StorageError:
        logger.exception("Cancel appointment failed", extra={"appointment_id": req.appointment_id})
        raise HTTPException(status_code=500, detail="Database error")
    if cancelled is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return CancelAppointmentResponseSchema(cancelled_appointment=AppointmentSchema.from_entity(cancelled))


@router.get("/get-all-appointments", response_model=AppointmentListResponseSchema)
def get_all_appointments(uc: BookingUseCase = Depends(get_booking_use_case)):
    try:
        rows = uc.list_all()
    except StorageError:
        logger.exception("Get all appointments failed")
        raise HTTPException(status_code=500, detail="Database error fetching all appointments")
    return AppointmentListResponseSchema(appointments=[AppointmentSchema.from_admin_row(r) for r in rows])
