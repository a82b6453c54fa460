from __future__ import annotations

import httpx

from salonbot.application.exceptions import DeliveryError
from salonbot.application.ports.message_platform import MessagePlatformPort
from salonbot.infrastructure.whatsapp.whatsapp_client import WhatsAppClient


class WhatsAppPlatform(MessagePlatformPort):
    def __init__(self, client: WhatsAppClient) -> None:
        self._client = client

    def send_text(self, recipient_id: str, text: str) -> None:
        try:
            self._client.send_text(recipient_id=recipient_id, text=text)
        except httpx.HTTPError as e:
            raise DeliveryError(f"WhatsApp delivery to {recipient_id} failed: {e}") from e
