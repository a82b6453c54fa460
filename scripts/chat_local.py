#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no WhatsApp).

Usage:
  python3 scripts/chat_local.py

What it does:
- Sends your typed messages through the same HandleTurnUseCase the /api/chat route uses
- Echoes the returned step, phone and draft back on the next turn, like a real caller
- Prints the reply and the state the caller would hold
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from salonbot.application.utils.state_codec import session_from_payload, temp_booking_to_payload
from salonbot.domain.entities.turn import TurnInput
from salonbot.wiring.dependencies import get_handle_turn_use_case


def _print_header() -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print("Type your message and press Enter.")
    print("Commands: /state (show echoed state), /reset, /quit, /help")
    print("-" * 60)


def main() -> None:
    use_case = get_handle_turn_use_case()
    step: str | None = None
    phone: str | None = None
    temp_booking: dict | None = None
    _print_header()

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /state -> show the state the caller echoes back")
            print("  /reset -> forget the session and start at the phone step")
            print("  /quit  -> exit")
            continue
        if cmd == "/reset":
            step, phone, temp_booking = None, None, None
            print("Session reset.")
            continue
        if cmd == "/state":
            print(json.dumps({"step": step, "phone": phone, "tempBooking": temp_booking}, indent=2))
            continue

        state = session_from_payload(step=step, phone=phone, temp_booking=temp_booking)
        result = use_case.execute(TurnInput(text=user_text, state=state))

        step = result.next_step.value
        phone = result.phone
        temp_booking = temp_booking_to_payload(result.temp_booking)

        print(f"\n{result.reply}")
        if result.buttons:
            print("[" + "] [".join(b.title for b in result.buttons) + "]")
        print(f"  (next step: {step})")


if __name__ == "__main__":
    main()
