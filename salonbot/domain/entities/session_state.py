from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum


class Step(str, Enum):
    PHONE = "phone"
    NEW_USER_NAME = "newUserName"
    MAIN_MENU = "mainMenu"
    MODIFY_PICK = "modifyPick"
    MODIFY_MENU = "modifyMenu"
    BOOK_SERVICE = "bookService"
    BOOK_BRANCH = "bookBranch"
    BOOK_DATE = "bookDate"
    BOOK_TIME = "bookTime"


class BookingMode(str, Enum):
    NEW = "new"
    MODIFY = "modify"


class ModifyType(str, Enum):
    SERVICES = "services"
    BRANCH = "branch"
    DATE = "date"
    TIME = "time"
    ALL = "all"


@dataclass(frozen=True)
class TempBooking:
    mode: BookingMode = BookingMode.NEW
    modify_type: ModifyType | None = None  # only in modify mode, set once
    services: tuple[str, ...] = ()
    location: str | None = None
    date_iso: str | None = None  # YYYY-MM-DD
    time_label: str | None = None  # 12-hour label, e.g. "4PM"
    total_price: Decimal | None = None
    appointment_id: int | None = None  # only in modify mode

    def toggle_service(self, service: str) -> "TempBooking":
        if service in self.services:
            return replace(self, services=tuple(s for s in self.services if s != service))
        return replace(self, services=self.services + (service,))

    @property
    def is_modify(self) -> bool:
        return self.mode == BookingMode.MODIFY


@dataclass(frozen=True)
class SessionState:
    step: Step = Step.PHONE
    phone: str | None = None
    temp_booking: TempBooking | None = None
