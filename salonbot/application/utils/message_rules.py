from __future__ import annotations

import re

from salonbot.domain.entities.intent import MenuAction

MENU_SYNONYMS: dict[str, MenuAction] = {
    "1": MenuAction.BOOK,
    "book": MenuAction.BOOK,
    "book appointment": MenuAction.BOOK,
    "book an appointment": MenuAction.BOOK,
    "new appointment": MenuAction.BOOK,
    "2": MenuAction.VIEW,
    "view": MenuAction.VIEW,
    "view appointments": MenuAction.VIEW,
    "view my appointments": MenuAction.VIEW,
    "my appointments": MenuAction.VIEW,
    "3": MenuAction.MODIFY,
    "modify": MenuAction.MODIFY,
    "modify appointment": MenuAction.MODIFY,
    "modify appointments": MenuAction.MODIFY,
    "reschedule": MenuAction.MODIFY,
    "reschedule/cancel": MenuAction.MODIFY,
    "reschedule / cancel": MenuAction.MODIFY,
    "reschedule or cancel": MenuAction.MODIFY,
    "change appointment": MenuAction.MODIFY,
}

DONE_WORDS = ("done", "0", "next", "continue", "finish")

PHONE_DIGITS = 10


def normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "").lower()).strip()


def normalize_menu_action(text: str, button_value: str | None = None) -> MenuAction | None:
    """
    Map menu input to a canonical action.
    A button value is already canonical and is not run through the synonym table.
    """
    if button_value:
        try:
            return MenuAction(button_value)
        except ValueError:
            return None
    return MENU_SYNONYMS.get(normalize_text(text))


def is_done_signal(text: str) -> bool:
    return normalize_text(text) in DONE_WORDS


def normalize_phone(text: str) -> str | None:
    """Digits only; valid when exactly ten remain."""
    digits = re.sub(r"\D", "", text or "")
    return digits if len(digits) == PHONE_DIGITS else None


def phone_from_sender(sender: str) -> str | None:
    """Channel senders carry a country code; the subscriber identity is the last ten digits."""
    digits = re.sub(r"\D", "", sender or "")
    if len(digits) < PHONE_DIGITS:
        return None
    return digits[-PHONE_DIGITS:]


def parse_choice(text: str, upper: int) -> int | None:
    """1-based menu choice in [1, upper]."""
    normalized = normalize_text(text)
    if not normalized.isdecimal():
        return None
    choice = int(normalized)
    return choice if 1 <= choice <= upper else None
