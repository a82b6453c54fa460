from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

BOOKING_WINDOW_DAYS = 30
OPENING_HOUR = 10
CLOSING_HOUR = 22

DATE_PATTERN = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")
SUFFIXED_HOUR_PATTERN = re.compile(r"^(\d{1,2})(AM|PM)$")
BARE_HOUR_PATTERN = re.compile(r"^(\d{1,2})$")


@dataclass(frozen=True)
class TimeSlot:
    hour24: int
    label: str


def today_in(timezone: ZoneInfo) -> date:
    return datetime.now(timezone).date()


def parse_date(text: str, timezone: ZoneInfo, reference_date: date | None = None) -> date | None:
    """Parse DD-MM-YYYY or DD/MM/YYYY within [today, today + 30 days]. Returns None otherwise."""
    if reference_date is None:
        reference_date = today_in(timezone)

    match = DATE_PATTERN.match((text or "").strip())
    if not match:
        return None

    day, month, year = (int(g) for g in match.groups())
    try:
        parsed = date(year, month, day)
    except ValueError:
        return None

    if parsed < reference_date or parsed > reference_date + timedelta(days=BOOKING_WINDOW_DAYS):
        return None
    return parsed


def parse_time(text: str) -> TimeSlot | None:
    """Parse "4PM"/"10 am" or a bare 24-hour "16" inside opening hours. Returns None otherwise."""
    normalized = re.sub(r"\s+", "", text or "").upper()

    hour24: int | None = None
    match = SUFFIXED_HOUR_PATTERN.match(normalized)
    if match:
        hour = int(match.group(1))
        if not 1 <= hour <= 12:
            return None
        if match.group(2) == "AM":
            hour24 = 0 if hour == 12 else hour
        else:
            hour24 = 12 if hour == 12 else hour + 12
    else:
        match = BARE_HOUR_PATTERN.match(normalized)
        if match:
            hour24 = int(match.group(1))
            if hour24 > 23:
                return None

    if hour24 is None:
        return None
    if not OPENING_HOUR <= hour24 <= CLOSING_HOUR:
        return None
    return TimeSlot(hour24=hour24, label=to_12_hour_label(hour24))


def to_12_hour_label(hour24: int) -> str:
    if hour24 == 0:
        return "12AM"
    if hour24 < 12:
        return f"{hour24}AM"
    if hour24 == 12:
        return "12PM"
    return f"{hour24 - 12}PM"


def label_to_hour(label: str) -> int:
    """Hour of a stored 12-hour label, used for ordering. Unknown labels sort last."""
    match = SUFFIXED_HOUR_PATTERN.match(re.sub(r"\s+", "", label or "").upper())
    if not match:
        return 24
    hour = int(match.group(1)) % 12
    return hour + 12 if match.group(2) == "PM" else hour


def format_display_date(value: date) -> str:
    return value.strftime("%d-%m-%Y")
