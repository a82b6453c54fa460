from __future__ import annotations

from datetime import date

from salonbot.application.utils.date_parser import (
    BOOKING_WINDOW_DAYS,
    CLOSING_HOUR,
    OPENING_HOUR,
    format_display_date,
    to_12_hour_label,
)
from salonbot.application.utils.pricing import format_price
from salonbot.domain.entities.appointment import Appointment
from salonbot.domain.entities.catalog import SalonCatalog
from salonbot.domain.entities.price import PriceBreakdown
from salonbot.domain.entities.turn import Button

GENERIC_FAILURE = "Sorry, something went wrong on our side. Please send your 10-digit phone number to start again."
ASK_PHONE = "Welcome! Please enter your 10-digit phone number to continue."
INVALID_PHONE = "That doesn't look like a valid phone number. Please enter exactly 10 digits."
ASK_NAME = "Looks like you're new here. What's your name?"
DEFAULT_CUSTOMER_NAME = "Guest"

MAIN_MENU = (
    "What would you like to do?\n"
    "1. Book appointment\n"
    "2. View appointments\n"
    "3. Reschedule/Cancel"
)
MAIN_MENU_BUTTONS = (
    Button(id="book", title="Book appointment"),
    Button(id="view", title="View appointments"),
    Button(id="modify", title="Reschedule/Cancel"),
)
INVALID_MENU_CHOICE = "Sorry, I didn't get that. Please reply with 1, 2 or 3."

MODIFY_MENU = (
    "What would you like to change?\n"
    "1. Services\n"
    "2. Branch\n"
    "3. Date\n"
    "4. Time\n"
    "5. Everything\n"
    "6. Cancel appointment\n"
    "7. Back to main menu"
)
INVALID_MODIFY_CHOICE = "Please reply with a number from 1 to 7."

NO_UPCOMING = "You have no upcoming appointments."
NO_APPOINTMENTS_TO_MODIFY = "You have no appointments to reschedule or cancel."
APPOINTMENT_GONE = "That appointment no longer exists."
INVALID_PICK = "Please reply with the number of one of the appointments listed."
EMPTY_SELECTION = "Please select at least one service before sending 'done'."
UNKNOWN_SERVICE = "Sorry, we don't offer that service."
INVALID_BRANCH = "Please choose a branch by its number."
INVALID_DATE = (
    "Please enter a valid date as DD-MM-YYYY (or DD/MM/YYYY) between today "
    f"and {BOOKING_WINDOW_DAYS} days from now."
)
INVALID_TIME = (
    f"Please enter a time between {to_12_hour_label(OPENING_HOUR)} and "
    f"{to_12_hour_label(CLOSING_HOUR)}, e.g. 4PM or 16."
)


def with_main_menu(text: str) -> str:
    return f"{text}\n\n{MAIN_MENU}"


def welcome_back(name: str) -> str:
    return with_main_menu(f"Welcome back, {name}!")


def nice_to_meet(name: str) -> str:
    return with_main_menu(f"Nice to meet you, {name}!")


def service_menu(catalog: SalonCatalog, selected: tuple[str, ...]) -> str:
    lines = ["Select a service by name or number (send it again to remove it):"]
    for index, (name, price) in enumerate(catalog.prices.items(), start=1):
        marker = " ✓" if name in selected else ""
        lines.append(f"{index}. {name} - {format_price(catalog, price)}{marker}")
    if catalog.combos:
        offers = "; ".join(
            f"{' + '.join(sorted(combo.members))} {format_price(catalog, combo.price)}"
            for combo in catalog.combos
        )
        lines.append(f"Combo offers: {offers}")
    lines.append("Send 'done' when you have finished.")
    return "\n".join(lines)


def selection_changed(catalog: SalonCatalog, service: str, added: bool, selected: tuple[str, ...]) -> str:
    action = "Added" if added else "Removed"
    current = ", ".join(selected) if selected else "nothing yet"
    return f"{action} {service}. Selected: {current}.\n\n{service_menu(catalog, selected)}"


def branch_menu(catalog: SalonCatalog) -> str:
    lines = ["Choose a branch:"]
    for index, branch in enumerate(catalog.branches, start=1):
        lines.append(f"{index}. {branch}")
    return "\n".join(lines)


def ask_date() -> str:
    return f"Enter your preferred date (DD-MM-YYYY), up to {BOOKING_WINDOW_DAYS} days ahead."


def ask_time() -> str:
    return (
        f"Enter your preferred time between {to_12_hour_label(OPENING_HOUR)} and "
        f"{to_12_hour_label(CLOSING_HOUR)} (e.g. 4PM or 16)."
    )


def estimate(catalog: SalonCatalog, services: tuple[str, ...], breakdown: PriceBreakdown) -> str:
    text = f"Selected: {', '.join(services)}. Estimated price: {format_price(catalog, breakdown.final_price)}"
    if breakdown.first_booking_offer_applied:
        text += " (first booking 50% off included)"
    return text + ". Weekend bookings get a further 10% off."


def describe_appointment(catalog: SalonCatalog, appointment: Appointment) -> str:
    return (
        f"{', '.join(appointment.services)} at {appointment.location} on "
        f"{format_display_date(appointment.appointment_date)} {appointment.appointment_time} - "
        f"{format_price(catalog, appointment.total_price)} ({appointment.status.value})"
    )


def appointment_list(catalog: SalonCatalog, appointments: list[Appointment], heading: str) -> str:
    lines = [heading]
    for index, appointment in enumerate(appointments, start=1):
        lines.append(f"{index}. {describe_appointment(catalog, appointment)}")
    return "\n".join(lines)


def offers_applied(breakdown: PriceBreakdown) -> str:
    offers = []
    if breakdown.weekend_offer_applied:
        offers.append("weekend 10% off")
    if breakdown.first_booking_offer_applied:
        offers.append("first booking 50% off")
    return f" Offers applied: {', '.join(offers)}." if offers else ""


def booking_confirmed(catalog: SalonCatalog, appointment: Appointment, breakdown: PriceBreakdown) -> str:
    return with_main_menu(
        f"Your appointment is booked: {describe_appointment(catalog, appointment)}."
        f"{offers_applied(breakdown)}"
    )


def field_updated(label: str, value: str) -> str:
    return with_main_menu(f"Your appointment {label} has been updated to {value}.")


def services_updated(catalog: SalonCatalog, services: tuple[str, ...], breakdown: PriceBreakdown) -> str:
    return with_main_menu(
        f"Your services have been updated to {', '.join(services)}. "
        f"New price: {format_price(catalog, breakdown.final_price)}.{offers_applied(breakdown)}"
    )


def appointment_updated(catalog: SalonCatalog, appointment: Appointment, breakdown: PriceBreakdown) -> str:
    return with_main_menu(
        f"Your appointment has been updated: {describe_appointment(catalog, appointment)}."
        f"{offers_applied(breakdown)}"
    )


def appointment_deleted() -> str:
    return with_main_menu("Your appointment has been cancelled.")


def modify_loaded(catalog: SalonCatalog, appointment: Appointment) -> str:
    return f"Selected: {describe_appointment(catalog, appointment)}\n\n{MODIFY_MENU}"


def date_label(value: date) -> str:
    return format_display_date(value)
