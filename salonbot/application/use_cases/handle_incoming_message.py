from __future__ import annotations

import logging

from salonbot.application.use_cases.handle_turn import HandleTurnUseCase
from salonbot.application.use_cases.send_reply import SendReplyUseCase
from salonbot.application.utils.message_rules import phone_from_sender
from salonbot.application.utils.state_codec import session_from_payload
from salonbot.domain.entities.message import Message
from salonbot.domain.entities.turn import TurnInput, TurnResult


class HandleIncomingMessageUseCase:
    """
    Bridge from a chat channel to the dialogue engine.

    Channels carry no echoed session state, so every inbound message is a
    fresh turn at the phone step identified only by the sender's number.
    Channel traffic therefore only ever reaches login: booking, viewing and
    modifying need the stateful POST /api/chat protocol.
    """

    def __init__(self, handle_turn: HandleTurnUseCase, send_reply: SendReplyUseCase) -> None:
        self._handle_turn = handle_turn
        self._send_reply = send_reply
        self._logger = logging.getLogger(__name__)

    def handle(self, message: Message) -> TurnResult:
        phone = phone_from_sender(message.sender_id)
        state = session_from_payload(step=None, phone=phone, temp_booking=None)

        self._logger.info(
            "Inbound message",
            extra={"message_id": message.id, "phone": phone, "platform": message.platform},
        )
        result = self._handle_turn.execute(TurnInput(text=message.text, state=state, button=message.button_id))
        self._send_reply.execute(recipient_id=message.sender_id, text=result.reply)
        return result
