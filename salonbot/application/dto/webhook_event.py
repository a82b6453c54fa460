from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from salonbot.domain.entities.message import Message


class WhatsAppWebhookDTO(BaseModel):
    object: str | None = None
    entry: list[dict[str, Any]] = Field(default_factory=list)

    def extract_messages(self) -> list[Message]:
        messages: list[Message] = []
        for entry in self.entry or []:
            for change in entry.get("changes", []) or []:
                value = change.get("value") or {}
                for msg in value.get("messages", []) or []:
                    mid = msg.get("id")
                    sender = msg.get("from")
                    if not (mid and sender):
                        continue

                    text, button_id = _message_content(msg)
                    if text is None:
                        continue

                    messages.append(
                        Message(
                            id=str(mid),
                            sender_id=str(sender),
                            text=text,
                            platform="whatsapp",
                            button_id=button_id,
                        )
                    )
        return messages


class Msg91WebhookDTO(BaseModel):
    sender: str
    message: str = ""
    message_id: str | None = Field(default=None, alias="messageId")

    def to_message(self) -> Message:
        return Message(
            id=self.message_id or f"msg91:{self.sender}",
            sender_id=self.sender,
            text=self.message,
            platform="msg91",
        )


def _message_content(msg: dict[str, Any]) -> tuple[str | None, str | None]:
    """Text of a message plus the reply id when it came from an interactive button or list."""
    kind = msg.get("type")
    if kind == "text":
        return (msg.get("text") or {}).get("body"), None
    if kind == "interactive":
        interactive = msg.get("interactive") or {}
        reply = interactive.get("button_reply") or interactive.get("list_reply") or {}
        if not reply:
            return None, None
        return str(reply.get("title") or reply.get("id") or ""), reply.get("id")
    if kind == "button":
        button = msg.get("button") or {}
        return button.get("text"), button.get("payload")
    return None, None
