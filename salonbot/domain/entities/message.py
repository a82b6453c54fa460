from dataclasses import dataclass


@dataclass(frozen=True)
class Message:
    id: str
    sender_id: str
    text: str
    platform: str
    button_id: str | None = None
