from __future__ import annotations

from dataclasses import dataclass, field

from salonbot.domain.entities.session_state import SessionState, Step, TempBooking


@dataclass(frozen=True)
class Button:
    id: str
    title: str


@dataclass(frozen=True)
class TurnInput:
    text: str
    state: SessionState = SessionState()
    button: str | None = None  # interactive button value, already canonical


@dataclass(frozen=True)
class TurnResult:
    reply: str
    next_step: Step
    phone: str | None = None
    temp_booking: TempBooking | None = None
    buttons: tuple[Button, ...] = field(default_factory=tuple)
