"""
Tests for date and time parsing.
"""

from datetime import date, timedelta
from zoneinfo import ZoneInfo

from salonbot.application.utils.date_parser import format_display_date, label_to_hour, parse_date, parse_time

UTC = ZoneInfo("UTC")
TODAY = date(2025, 6, 2)


def test_parse_date_dash_and_slash():
    assert parse_date("05-06-2025", UTC, TODAY) == date(2025, 6, 5)
    assert parse_date("5/6/2025", UTC, TODAY) == date(2025, 6, 5)
    assert parse_date("  07-06-2025 ", UTC, TODAY) == date(2025, 6, 7)


def test_parse_date_window_bounds():
    assert parse_date(format_display_date(TODAY), UTC, TODAY) == TODAY
    last = TODAY + timedelta(days=30)
    assert parse_date(format_display_date(last), UTC, TODAY) == last
    assert parse_date(format_display_date(last + timedelta(days=1)), UTC, TODAY) is None
    assert parse_date(format_display_date(TODAY - timedelta(days=1)), UTC, TODAY) is None


def test_parse_date_rejects_impossible_dates():
    assert parse_date("31-02-2025", UTC, TODAY) is None
    assert parse_date("00-06-2025", UTC, TODAY) is None
    assert parse_date("15-13-2025", UTC, TODAY) is None


def test_parse_date_rejects_other_formats():
    assert parse_date("2025-06-05", UTC, TODAY) is None
    assert parse_date("tomorrow", UTC, TODAY) is None
    assert parse_date("05-06-25", UTC, TODAY) is None
    assert parse_date("", UTC, TODAY) is None


def test_parse_time_bare_and_suffixed_agree():
    bare = parse_time("16")
    suffixed = parse_time("4PM")
    assert bare is not None and suffixed is not None
    assert bare.label == suffixed.label == "4PM"
    assert bare.hour24 == 16


def test_parse_time_whitespace_and_case():
    assert parse_time(" 4 pm ").label == "4PM"
    assert parse_time("11am").label == "11AM"


def test_parse_time_window():
    assert parse_time("10AM").label == "10AM"
    assert parse_time("22").label == "10PM"
    assert parse_time("12PM").label == "12PM"
    assert parse_time("9AM") is None
    assert parse_time("23") is None
    assert parse_time("11PM") is None


def test_parse_time_rejects_out_of_range_hours():
    assert parse_time("0AM") is None
    assert parse_time("13PM") is None
    assert parse_time("12AM") is None
    assert parse_time("24") is None
    assert parse_time("4:30PM") is None
    assert parse_time("afternoon") is None


def test_label_to_hour_orders_labels():
    assert label_to_hour("10AM") < label_to_hour("12PM") < label_to_hour("4PM") < label_to_hour("10PM")
    assert label_to_hour("garbage") == 24
