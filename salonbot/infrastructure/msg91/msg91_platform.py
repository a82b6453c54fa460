from __future__ import annotations

import logging

import httpx

from salonbot.application.exceptions import DeliveryError
from salonbot.application.ports.message_platform import MessagePlatformPort


class Msg91Platform(MessagePlatformPort):
    """MSG91 WhatsApp outbound API."""

    def __init__(self, api_key: str, send_endpoint: str, http_client: httpx.Client | None = None) -> None:
        self._api_key = api_key
        self._send_endpoint = send_endpoint
        self._client = http_client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def send_text(self, recipient_id: str, text: str) -> None:
        payload = {"to": recipient_id, "type": "text", "message": text}
        headers = {"authkey": self._api_key, "Content-Type": "application/json"}
        try:
            resp = self._client.post(self._send_endpoint, headers=headers, json=payload)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            self._logger.error("MSG91 send failed", extra={"recipient": recipient_id, "reason": str(e)})
            raise DeliveryError(f"MSG91 delivery to {recipient_id} failed: {e}") from e
