from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from salonbot.application.utils.message_rules import normalize_phone
from salonbot.domain.entities.session_state import BookingMode, ModifyType, SessionState, Step, TempBooking

# Which modify types may be in flight at each booking step.
MODIFY_TYPES_BY_STEP: dict[Step, tuple[ModifyType, ...]] = {
    Step.BOOK_SERVICE: (ModifyType.SERVICES, ModifyType.ALL),
    Step.BOOK_BRANCH: (ModifyType.BRANCH, ModifyType.ALL),
    Step.BOOK_DATE: (ModifyType.DATE, ModifyType.ALL),
    Step.BOOK_TIME: (ModifyType.TIME, ModifyType.ALL),
}


def session_from_payload(
    step: str | None,
    phone: str | None,
    temp_booking: dict[str, Any] | None,
) -> SessionState:
    """Build a SessionState from caller-echoed values, defaulting anything unusable."""
    try:
        parsed_step = Step(step) if step else Step.PHONE
    except ValueError:
        parsed_step = Step.PHONE

    return SessionState(
        step=parsed_step,
        phone=normalize_phone(phone) if phone else None,
        temp_booking=temp_booking_from_payload(temp_booking),
    )


def temp_booking_from_payload(data: dict[str, Any] | None) -> TempBooking | None:
    if not isinstance(data, dict):
        return None

    try:
        mode = BookingMode(data.get("mode") or BookingMode.NEW.value)
    except ValueError:
        mode = BookingMode.NEW

    modify_type: ModifyType | None = None
    if mode == BookingMode.MODIFY and data.get("modifyType"):
        try:
            modify_type = ModifyType(data["modifyType"])
        except ValueError:
            modify_type = None

    services = data.get("services") or []
    if not isinstance(services, (list, tuple)):
        services = []

    return TempBooking(
        mode=mode,
        modify_type=modify_type,
        services=tuple(s for s in services if isinstance(s, str)),
        location=_optional_str(data.get("location")),
        date_iso=_optional_str(data.get("dateISO")),
        time_label=_optional_str(data.get("timeLabel")),
        total_price=_optional_decimal(data.get("totalPrice")),
        appointment_id=_optional_int(data.get("appointmentId")) if mode == BookingMode.MODIFY else None,
    )


def temp_booking_to_payload(booking: TempBooking | None) -> dict[str, Any] | None:
    if booking is None:
        return None

    result: dict[str, Any] = {"mode": booking.mode.value}
    if booking.modify_type is not None:
        result["modifyType"] = booking.modify_type.value
    result["services"] = list(booking.services)
    if booking.location is not None:
        result["location"] = booking.location
    if booking.date_iso is not None:
        result["dateISO"] = booking.date_iso
    if booking.time_label is not None:
        result["timeLabel"] = booking.time_label
    if booking.total_price is not None:
        result["totalPrice"] = float(booking.total_price)
    if booking.appointment_id is not None:
        result["appointmentId"] = booking.appointment_id
    return result


def satisfies_step(state: SessionState) -> bool:
    """Whether the state carries everything its step needs to run."""
    step = state.step
    if step == Step.PHONE:
        return True
    if not state.phone:
        return False
    if step in (Step.NEW_USER_NAME, Step.MAIN_MENU, Step.MODIFY_PICK):
        return True

    draft = state.temp_booking
    if draft is None:
        return False

    if step == Step.MODIFY_MENU:
        return draft.is_modify and draft.appointment_id is not None and draft.modify_type is None

    if draft.is_modify:
        if draft.appointment_id is None or draft.modify_type not in MODIFY_TYPES_BY_STEP[step]:
            return False
        if draft.modify_type != ModifyType.ALL:
            return True

    if step == Step.BOOK_SERVICE:
        return True
    if step == Step.BOOK_BRANCH:
        return bool(draft.services)
    if step == Step.BOOK_DATE:
        return bool(draft.services) and draft.location is not None
    return bool(draft.services) and draft.location is not None and draft.date_iso is not None


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def _optional_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
