"""
Tests for menu intent normalization and input helpers.
"""

from salonbot.application.utils.message_rules import (
    is_done_signal,
    normalize_menu_action,
    normalize_phone,
    parse_choice,
    phone_from_sender,
)
from salonbot.domain.entities.intent import MenuAction


def test_menu_numbers_and_phrases():
    assert normalize_menu_action("1") == MenuAction.BOOK
    assert normalize_menu_action("  Book   Appointment ") == MenuAction.BOOK
    assert normalize_menu_action("2") == MenuAction.VIEW
    assert normalize_menu_action("View my appointments") == MenuAction.VIEW
    assert normalize_menu_action("3") == MenuAction.MODIFY
    assert normalize_menu_action("Reschedule/Cancel") == MenuAction.MODIFY
    assert normalize_menu_action("reschedule") == MenuAction.MODIFY


def test_unknown_menu_text():
    assert normalize_menu_action("hello") is None
    assert normalize_menu_action("4") is None
    assert normalize_menu_action("") is None


def test_button_value_bypasses_synonyms():
    assert normalize_menu_action("whatever the title said", "view") == MenuAction.VIEW
    assert normalize_menu_action("1", "modify") == MenuAction.MODIFY
    assert normalize_menu_action("1", "bogus") is None


def test_done_signals():
    for word in ("done", "DONE", " 0 ", "next", "Continue", "finish"):
        assert is_done_signal(word)
    assert not is_done_signal("haircut")


def test_normalize_phone():
    assert normalize_phone("9876543210") == "9876543210"
    assert normalize_phone("98765-43210") == "9876543210"
    assert normalize_phone("(987) 654 3210") == "9876543210"
    assert normalize_phone("12345") is None
    assert normalize_phone("919876543210") is None
    assert normalize_phone("") is None


def test_phone_from_sender_keeps_last_ten_digits():
    assert phone_from_sender("919876543210") == "9876543210"
    assert phone_from_sender("+91 98765 43210") == "9876543210"
    assert phone_from_sender("12345") is None


def test_parse_choice():
    assert parse_choice("2", 3) == 2
    assert parse_choice(" 3 ", 3) == 3
    assert parse_choice("0", 3) is None
    assert parse_choice("4", 3) is None
    assert parse_choice("two", 3) is None


def test_parse_choice_rejects_non_ascii_digits():
    assert parse_choice("²", 3) is None
    assert parse_choice("³", 7) is None
