from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Callable
from zoneinfo import ZoneInfo

from salonbot.application.exceptions import StorageError
from salonbot.application.ports.booking_repository import BookingRepositoryPort
from salonbot.application.use_cases.booking import BookingUseCase
from salonbot.application.utils import replies
from salonbot.application.utils.date_parser import parse_date, parse_time, today_in
from salonbot.application.utils.message_rules import (
    is_done_signal,
    normalize_menu_action,
    normalize_phone,
    parse_choice,
)
from salonbot.application.utils.state_codec import satisfies_step
from salonbot.domain.entities.catalog import SalonCatalog
from salonbot.domain.entities.intent import MenuAction
from salonbot.domain.entities.session_state import BookingMode, ModifyType, SessionState, Step, TempBooking
from salonbot.domain.entities.turn import TurnInput, TurnResult

MODIFY_MENU_CHOICES: dict[int, tuple[ModifyType, Step]] = {
    1: (ModifyType.SERVICES, Step.BOOK_SERVICE),
    2: (ModifyType.BRANCH, Step.BOOK_BRANCH),
    3: (ModifyType.DATE, Step.BOOK_DATE),
    4: (ModifyType.TIME, Step.BOOK_TIME),
    5: (ModifyType.ALL, Step.BOOK_SERVICE),
}
CANCEL_CHOICE = 6
BACK_CHOICE = 7


class HandleTurnUseCase:
    """
    Dialogue state machine: one call per inbound message.

    The caller owns the session state and echoes it back on the next turn;
    nothing about the conversation is kept here between calls.
    """

    def __init__(
        self,
        repository: BookingRepositoryPort,
        catalog: SalonCatalog,
        booking: BookingUseCase,
        timezone: ZoneInfo,
        today: Callable[[], date] | None = None,
    ) -> None:
        self._repository = repository
        self._catalog = catalog
        self._timezone = timezone
        self._booking = booking
        self._today = today or (lambda: today_in(timezone))
        self._logger = logging.getLogger(__name__)
        self._handlers: dict[Step, Callable[[TurnInput, SessionState], TurnResult]] = {
            Step.PHONE: self._handle_phone,
            Step.NEW_USER_NAME: self._handle_new_user_name,
            Step.MAIN_MENU: self._handle_main_menu,
            Step.MODIFY_PICK: self._handle_modify_pick,
            Step.MODIFY_MENU: self._handle_modify_menu,
            Step.BOOK_SERVICE: self._handle_book_service,
            Step.BOOK_BRANCH: self._handle_book_branch,
            Step.BOOK_DATE: self._handle_book_date,
            Step.BOOK_TIME: self._handle_book_time,
        }

    def execute(self, turn: TurnInput) -> TurnResult:
        state = turn.state
        if not satisfies_step(state):
            self._logger.warning(
                "Session state incomplete for step; restarting",
                extra={"phone": state.phone, "step": state.step.value},
            )
            return self._restart(state.phone)

        try:
            result = self._handlers[state.step](turn, state)
        except StorageError:
            self._logger.exception(
                "Storage failure during turn",
                extra={"phone": state.phone, "step": state.step.value},
            )
            return TurnResult(reply=replies.GENERIC_FAILURE, next_step=Step.PHONE)

        self._logger.info(
            "Turn handled",
            extra={"phone": result.phone, "step": state.step.value, "next_step": result.next_step.value},
        )
        return result

    # --- login -------------------------------------------------------------

    def _handle_phone(self, turn: TurnInput, state: SessionState) -> TurnResult:
        phone = normalize_phone(turn.text)
        if not phone:
            return self._reprompt(state, replies.INVALID_PHONE)

        user = self._repository.get_user(phone)
        if user:
            return self._main_menu(phone, replies.welcome_back(user.display_name))
        return TurnResult(reply=replies.ASK_NAME, next_step=Step.NEW_USER_NAME, phone=phone)

    def _handle_new_user_name(self, turn: TurnInput, state: SessionState) -> TurnResult:
        name = " ".join(turn.text.split()) or replies.DEFAULT_CUSTOMER_NAME
        user = self._repository.upsert_user(state.phone, name)
        self._logger.info("User registered", extra={"phone": user.phone})
        return self._main_menu(user.phone, replies.nice_to_meet(user.display_name))

    # --- main menu ---------------------------------------------------------

    def _handle_main_menu(self, turn: TurnInput, state: SessionState) -> TurnResult:
        action = normalize_menu_action(turn.text, turn.button)
        if action is None:
            return self._reprompt(state, replies.with_main_menu(replies.INVALID_MENU_CHOICE), menu_buttons=True)

        self._logger.info("Menu action", extra={"phone": state.phone, "action": action.value})

        if action == MenuAction.BOOK:
            draft = TempBooking(mode=BookingMode.NEW)
            return TurnResult(
                reply=replies.service_menu(self._catalog, draft.services),
                next_step=Step.BOOK_SERVICE,
                phone=state.phone,
                temp_booking=draft,
            )

        if action == MenuAction.VIEW:
            appointments = self._repository.list_appointments(state.phone, booked_only=True)
            if not appointments:
                return self._main_menu(state.phone, replies.with_main_menu(replies.NO_UPCOMING))
            listing = replies.appointment_list(self._catalog, appointments, "Your upcoming appointments:")
            return self._main_menu(state.phone, replies.with_main_menu(listing))

        appointments = self._repository.list_appointments(state.phone)
        if not appointments:
            return self._main_menu(state.phone, replies.with_main_menu(replies.NO_APPOINTMENTS_TO_MODIFY))
        listing = replies.appointment_list(
            self._catalog, appointments, "Which appointment would you like to change? Reply with its number."
        )
        return TurnResult(reply=listing, next_step=Step.MODIFY_PICK, phone=state.phone)

    # --- modify ------------------------------------------------------------

    def _handle_modify_pick(self, turn: TurnInput, state: SessionState) -> TurnResult:
        appointments = self._repository.list_appointments(state.phone)
        if not appointments:
            return self._main_menu(state.phone, replies.with_main_menu(replies.NO_APPOINTMENTS_TO_MODIFY))

        choice = parse_choice(turn.text, len(appointments))
        if choice is None:
            listing = replies.appointment_list(self._catalog, appointments, replies.INVALID_PICK)
            return self._reprompt(state, listing)

        appointment = appointments[choice - 1]
        draft = TempBooking(
            mode=BookingMode.MODIFY,
            services=appointment.services,
            location=appointment.location,
            date_iso=appointment.appointment_date.isoformat(),
            time_label=appointment.appointment_time,
            total_price=appointment.total_price,
            appointment_id=appointment.appointment_id,
        )
        return TurnResult(
            reply=replies.modify_loaded(self._catalog, appointment),
            next_step=Step.MODIFY_MENU,
            phone=state.phone,
            temp_booking=draft,
        )

    def _handle_modify_menu(self, turn: TurnInput, state: SessionState) -> TurnResult:
        draft = state.temp_booking
        choice = parse_choice(turn.text, BACK_CHOICE)
        if choice is None:
            return self._reprompt(state, f"{replies.INVALID_MODIFY_CHOICE}\n\n{replies.MODIFY_MENU}")

        if choice == BACK_CHOICE:
            return self._main_menu(state.phone, replies.MAIN_MENU)

        if not self._owns_appointment(state):
            return self._appointment_gone(state)

        if choice == CANCEL_CHOICE:
            deleted = self._repository.delete_appointment(draft.appointment_id)
            self._logger.info(
                "Appointment deleted",
                extra={"phone": state.phone, "appointment_id": draft.appointment_id, "reason": "modify_menu"},
            )
            if not deleted:
                return self._appointment_gone(state)
            return self._main_menu(state.phone, replies.appointment_deleted())

        modify_type, next_step = MODIFY_MENU_CHOICES[choice]
        if modify_type in (ModifyType.SERVICES, ModifyType.ALL):
            draft = replace(draft, modify_type=modify_type, services=())
        else:
            draft = replace(draft, modify_type=modify_type)
        return TurnResult(
            reply=self._prompt_for(next_step, draft),
            next_step=next_step,
            phone=state.phone,
            temp_booking=draft,
        )

    # --- booking steps -----------------------------------------------------

    def _handle_book_service(self, turn: TurnInput, state: SessionState) -> TurnResult:
        draft = state.temp_booking

        if is_done_signal(turn.button or turn.text):
            if not draft.services:
                return self._reprompt(state, f"{replies.EMPTY_SELECTION}\n\n{replies.service_menu(self._catalog, ())}")

            if draft.modify_type == ModifyType.SERVICES:
                if not self._owns_appointment(state):
                    return self._appointment_gone(state)
                breakdown = self._booking.quote(
                    state.phone, draft.services, _iso_to_date(draft.date_iso), draft.appointment_id
                )
                updated = self._repository.update_appointment(
                    draft.appointment_id,
                    services=draft.services,
                    total_price=breakdown.final_price,
                )
                if updated is None:
                    return self._appointment_gone(state)
                return self._main_menu(state.phone, replies.services_updated(self._catalog, draft.services, breakdown))

            # The date is not known yet, so this is an estimate without the weekend offer.
            breakdown = self._booking.quote(state.phone, draft.services, None, draft.appointment_id)
            draft = replace(draft, total_price=breakdown.final_price)
            return TurnResult(
                reply=(
                    f"{replies.estimate(self._catalog, draft.services, breakdown)}\n\n"
                    f"{replies.branch_menu(self._catalog)}"
                ),
                next_step=Step.BOOK_BRANCH,
                phone=state.phone,
                temp_booking=draft,
            )

        service = self._catalog.resolve_service(turn.button or turn.text)
        if service is None:
            return self._reprompt(
                state, f"{replies.UNKNOWN_SERVICE}\n\n{replies.service_menu(self._catalog, draft.services)}"
            )

        added = service not in draft.services
        draft = draft.toggle_service(service)
        return TurnResult(
            reply=replies.selection_changed(self._catalog, service, added, draft.services),
            next_step=Step.BOOK_SERVICE,
            phone=state.phone,
            temp_booking=draft,
        )

    def _handle_book_branch(self, turn: TurnInput, state: SessionState) -> TurnResult:
        draft = state.temp_booking
        branch = self._catalog.resolve_branch(turn.button or turn.text)
        if branch is None:
            return self._reprompt(state, f"{replies.INVALID_BRANCH}\n\n{replies.branch_menu(self._catalog)}")

        if draft.modify_type == ModifyType.BRANCH:
            if not self._owns_appointment(state):
                return self._appointment_gone(state)
            updated = self._repository.update_appointment(draft.appointment_id, location=branch)
            if updated is None:
                return self._appointment_gone(state)
            return self._main_menu(state.phone, replies.field_updated("branch", branch))

        draft = replace(draft, location=branch)
        return TurnResult(reply=replies.ask_date(), next_step=Step.BOOK_DATE, phone=state.phone, temp_booking=draft)

    def _handle_book_date(self, turn: TurnInput, state: SessionState) -> TurnResult:
        draft = state.temp_booking
        parsed = parse_date(turn.text, self._timezone, self._today())
        if parsed is None:
            return self._reprompt(state, replies.INVALID_DATE)

        if draft.modify_type == ModifyType.DATE:
            if not self._owns_appointment(state):
                return self._appointment_gone(state)
            updated = self._repository.update_appointment(draft.appointment_id, appointment_date=parsed)
            if updated is None:
                return self._appointment_gone(state)
            return self._main_menu(state.phone, replies.field_updated("date", replies.date_label(parsed)))

        draft = replace(draft, date_iso=parsed.isoformat())
        return TurnResult(reply=replies.ask_time(), next_step=Step.BOOK_TIME, phone=state.phone, temp_booking=draft)

    def _handle_book_time(self, turn: TurnInput, state: SessionState) -> TurnResult:
        draft = state.temp_booking
        slot = parse_time(turn.text)
        if slot is None:
            return self._reprompt(state, replies.INVALID_TIME)

        if draft.modify_type == ModifyType.TIME:
            if not self._owns_appointment(state):
                return self._appointment_gone(state)
            updated = self._repository.update_appointment(draft.appointment_id, appointment_time=slot.label)
            if updated is None:
                return self._appointment_gone(state)
            return self._main_menu(state.phone, replies.field_updated("time", slot.label))

        appointment_date = _iso_to_date(draft.date_iso)
        if appointment_date is None:
            return self._restart(state.phone)

        if draft.modify_type == ModifyType.ALL:
            if not self._owns_appointment(state):
                return self._appointment_gone(state)
            breakdown = self._booking.quote(state.phone, draft.services, appointment_date, draft.appointment_id)
            updated = self._repository.update_appointment(
                draft.appointment_id,
                services=draft.services,
                location=draft.location,
                appointment_date=appointment_date,
                appointment_time=slot.label,
                total_price=breakdown.final_price,
            )
            if updated is None:
                return self._appointment_gone(state)
            return self._main_menu(state.phone, replies.appointment_updated(self._catalog, updated, breakdown))

        booked = self._booking.book(
            phone=state.phone,
            services=draft.services,
            location=draft.location,
            appointment_date=appointment_date,
            appointment_time=slot.label,
        )
        return self._main_menu(state.phone, replies.booking_confirmed(self._catalog, booked.appointment, booked.price))

    # --- helpers -----------------------------------------------------------

    def _prompt_for(self, step: Step, draft: TempBooking) -> str:
        if step == Step.BOOK_SERVICE:
            return replies.service_menu(self._catalog, draft.services)
        if step == Step.BOOK_BRANCH:
            return replies.branch_menu(self._catalog)
        if step == Step.BOOK_DATE:
            return replies.ask_date()
        return replies.ask_time()

    def _main_menu(self, phone: str, text: str) -> TurnResult:
        return TurnResult(
            reply=text,
            next_step=Step.MAIN_MENU,
            phone=phone,
            buttons=replies.MAIN_MENU_BUTTONS,
        )

    def _reprompt(self, state: SessionState, text: str, menu_buttons: bool = False) -> TurnResult:
        return TurnResult(
            reply=text,
            next_step=state.step,
            phone=state.phone,
            temp_booking=state.temp_booking,
            buttons=replies.MAIN_MENU_BUTTONS if menu_buttons else (),
        )

    def _owns_appointment(self, state: SessionState) -> bool:
        """The draft's appointment still exists and belongs to the logged-in subscriber."""
        appointment_id = state.temp_booking.appointment_id
        appointment = self._repository.get_appointment(appointment_id)
        if appointment is not None and appointment.customer_phone == state.phone:
            return True
        self._logger.warning(
            "Draft appointment missing or not owned by subscriber",
            extra={"phone": state.phone, "appointment_id": appointment_id},
        )
        return False

    def _appointment_gone(self, state: SessionState) -> TurnResult:
        return self._main_menu(state.phone, replies.with_main_menu(replies.APPOINTMENT_GONE))

    def _restart(self, phone: str | None) -> TurnResult:
        if phone:
            return self._main_menu(phone, replies.with_main_menu("Let's start again."))
        return TurnResult(reply=replies.ASK_PHONE, next_step=Step.PHONE)


def _iso_to_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
