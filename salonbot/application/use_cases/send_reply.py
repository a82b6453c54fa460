from __future__ import annotations

import logging

from salonbot.application.exceptions import DeliveryError
from salonbot.application.ports.message_platform import MessagePlatformPort


class SendReplyUseCase:
    def __init__(self, platform: MessagePlatformPort, auto_reply_enabled: bool) -> None:
        self._platform = platform
        self._auto_reply_enabled = auto_reply_enabled
        self._logger = logging.getLogger(__name__)

    def execute(self, recipient_id: str, text: str) -> bool:
        """Send a reply. Returns True if actually sent, False if skipped or failed."""
        if not self._auto_reply_enabled:
            self._logger.info("WOULD_SEND_REPLY", extra={"recipient": recipient_id, "reply_text": text})
            self._logger.info("AUTO_REPLY_ENABLED=false -> skipping send")
            return False
        try:
            self._platform.send_text(recipient_id=recipient_id, text=text)
        except DeliveryError as e:
            # Storage changes made during the turn stay committed.
            self._logger.error("Reply delivery failed", extra={"recipient": recipient_id, "reason": str(e)})
            return False
        return True
