"""
Tests for the chat channels: webhook parsing and verification, outbound senders,
and the inbound bridge to the dialogue engine.
"""

from __future__ import annotations

import hashlib
import hmac
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import PHONE, make_engine
from salonbot.application.dto.webhook_event import Msg91WebhookDTO, WhatsAppWebhookDTO
from salonbot.application.exceptions import DeliveryError
from salonbot.application.ports.message_platform import MessagePlatformPort
from salonbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from salonbot.application.use_cases.send_reply import SendReplyUseCase
from salonbot.application.utils import replies
from salonbot.core.config import settings
from salonbot.domain.entities.message import Message
from salonbot.domain.entities.session_state import Step
from salonbot.infrastructure.mock_platform import MockMessagePlatform
from salonbot.infrastructure.msg91.msg91_platform import Msg91Platform
from salonbot.infrastructure.whatsapp.webhook_verify import verify_get_request, verify_post_signature
from salonbot.infrastructure.whatsapp.whatsapp_client import WhatsAppClient
from salonbot.infrastructure.whatsapp.whatsapp_platform import WhatsAppPlatform
from salonbot.main import app
from salonbot.wiring.dependencies import get_msg91_incoming_use_case, get_whatsapp_incoming_use_case

SENDER = "91" + PHONE


def whatsapp_payload(*messages):
    return {
        "object": "whatsapp_business_account",
        "entry": [{"changes": [{"value": {"messages": list(messages)}}]}],
    }


def text_message(body, mid="wamid.1"):
    return {"id": mid, "from": SENDER, "type": "text", "text": {"body": body}}


class FailingPlatform(MessagePlatformPort):
    def send_text(self, recipient_id, text):
        raise DeliveryError("provider returned 503")


# --- payload parsing -----------------------------------------------------


def test_extract_text_and_interactive_messages():
    payload = whatsapp_payload(
        text_message("9876543210"),
        {
            "id": "wamid.2",
            "from": SENDER,
            "type": "interactive",
            "interactive": {"type": "button_reply", "button_reply": {"id": "view", "title": "View appointments"}},
        },
        {"id": "wamid.3", "from": SENDER, "type": "image", "image": {"id": "media"}},
    )
    messages = WhatsAppWebhookDTO.model_validate(payload).extract_messages()
    assert len(messages) == 2
    assert messages[0] == Message(id="wamid.1", sender_id=SENDER, text="9876543210", platform="whatsapp")
    assert messages[1].text == "View appointments"
    assert messages[1].button_id == "view"


def test_status_only_payload_has_no_messages():
    payload = {"entry": [{"changes": [{"value": {"statuses": [{"id": "wamid.1", "status": "read"}]}}]}]}
    assert WhatsAppWebhookDTO.model_validate(payload).extract_messages() == []


def test_msg91_payload():
    event = Msg91WebhookDTO.model_validate({"sender": SENDER, "message": "hi", "messageId": "m-1"})
    message = event.to_message()
    assert message.id == "m-1"
    assert message.sender_id == SENDER
    assert message.platform == "msg91"


# --- verification --------------------------------------------------------


def test_verify_get_request():
    params = {"hub.mode": "subscribe", "hub.verify_token": "secret", "hub.challenge": "1158201444"}
    assert verify_get_request(params, "secret") == "1158201444"
    assert verify_get_request(params, "other") is None
    assert verify_get_request(params, "") is None
    assert verify_get_request({**params, "hub.mode": "unsubscribe"}, "secret") is None


def test_verify_post_signature():
    body = b'{"entry": []}'
    signature = "sha256=" + hmac.new(b"app-secret", body, hashlib.sha256).hexdigest()
    assert verify_post_signature(body, signature, "app-secret", "prod")
    assert not verify_post_signature(body, "sha256=deadbeef", "app-secret", "prod")
    assert not verify_post_signature(body, signature, None, "prod")
    assert not verify_post_signature(body, None, "app-secret", "prod")
    assert verify_post_signature(body, None, "app-secret", "dev")


# --- outbound ------------------------------------------------------------


def test_whatsapp_client_payload():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"messages": [{"id": "wamid.out"}]})

    client = WhatsAppClient(
        access_token="token",
        phone_number_id="12345",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )
    WhatsAppPlatform(client).send_text(SENDER, "hello")

    assert captured["url"] == "https://graph.facebook.com/v20.0/12345/messages"
    assert captured["auth"] == "Bearer token"
    assert captured["body"]["to"] == SENDER
    assert captured["body"]["text"]["body"] == "hello"


def test_whatsapp_error_becomes_delivery_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"error": {"code": 131000}}))
    client = WhatsAppClient("token", "12345", http_client=httpx.Client(transport=transport))
    with pytest.raises(DeliveryError):
        WhatsAppPlatform(client).send_text(SENDER, "hello")


def test_msg91_send_and_error():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["authkey"] = request.headers["authkey"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": "success"})

    ok = Msg91Platform("key", "https://msg91.test/send", http_client=httpx.Client(transport=httpx.MockTransport(handler)))
    ok.send_text(SENDER, "hello")
    assert captured == {"authkey": "key", "body": {"to": SENDER, "type": "text", "message": "hello"}}

    down = Msg91Platform(
        "key",
        "https://msg91.test/send",
        http_client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503))),
    )
    with pytest.raises(DeliveryError):
        down.send_text(SENDER, "hello")


def test_send_reply_respects_auto_reply_flag():
    platform = MockMessagePlatform()
    assert not SendReplyUseCase(platform, auto_reply_enabled=False).execute(SENDER, "hi")
    assert platform.sent == []
    assert SendReplyUseCase(platform, auto_reply_enabled=True).execute(SENDER, "hi")
    assert platform.sent == [(SENDER, "hi")]


def test_delivery_failure_is_not_raised():
    assert not SendReplyUseCase(FailingPlatform(), auto_reply_enabled=True).execute(SENDER, "hi")


# --- inbound bridge ------------------------------------------------------


def test_inbound_message_starts_at_phone_step(store):
    platform = MockMessagePlatform()
    use_case = HandleIncomingMessageUseCase(make_engine(store), SendReplyUseCase(platform, auto_reply_enabled=True))

    result = use_case.handle(Message(id="m-1", sender_id=SENDER, text=PHONE, platform="msg91"))
    assert result.next_step == Step.NEW_USER_NAME
    assert platform.sent == [(SENDER, replies.ASK_NAME)]


def test_inbound_turn_survives_delivery_failure(store):
    store.upsert_user(PHONE, "Priya")
    use_case = HandleIncomingMessageUseCase(
        make_engine(store), SendReplyUseCase(FailingPlatform(), auto_reply_enabled=True)
    )
    result = use_case.handle(Message(id="m-1", sender_id=SENDER, text=PHONE, platform="whatsapp"))
    assert result.next_step == Step.MAIN_MENU


# --- HTTP ----------------------------------------------------------------


@pytest.fixture
def platform(store):
    platform = MockMessagePlatform()
    use_case = HandleIncomingMessageUseCase(make_engine(store), SendReplyUseCase(platform, auto_reply_enabled=True))
    app.dependency_overrides[get_whatsapp_incoming_use_case] = lambda: use_case
    app.dependency_overrides[get_msg91_incoming_use_case] = lambda: use_case
    yield platform
    app.dependency_overrides.clear()


def test_get_verification(monkeypatch):
    monkeypatch.setattr(settings, "WHATSAPP_VERIFY_TOKEN", "secret")
    client = TestClient(app)
    params = {"hub.mode": "subscribe", "hub.verify_token": "secret", "hub.challenge": "42"}
    resp = client.get("/webhooks/whatsapp", params=params)
    assert resp.status_code == 200
    assert resp.text == "42"

    resp = client.get("/webhooks/whatsapp", params={**params, "hub.verify_token": "wrong"})
    assert resp.status_code == 403


def test_whatsapp_post_replies_through_platform(monkeypatch, platform):
    monkeypatch.setattr(settings, "ENV", "dev")
    client = TestClient(app)
    resp = client.post("/webhooks/whatsapp", json=whatsapp_payload(text_message(PHONE)))
    assert resp.status_code == 200
    assert platform.sent == [(SENDER, replies.ASK_NAME)]


def test_whatsapp_post_rejects_bad_signature(monkeypatch, platform):
    monkeypatch.setattr(settings, "WHATSAPP_APP_SECRET", "app-secret")
    client = TestClient(app)
    resp = client.post(
        "/webhooks/whatsapp",
        content=json.dumps(whatsapp_payload(text_message(PHONE))),
        headers={"Content-Type": "application/json", "X-Hub-Signature-256": "sha256=deadbeef"},
    )
    assert resp.status_code == 403
    assert platform.sent == []


def test_whatsapp_post_rejects_bad_json(monkeypatch, platform):
    monkeypatch.setattr(settings, "ENV", "dev")
    client = TestClient(app)
    resp = client.post("/webhooks/whatsapp", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400


def test_msg91_post(platform):
    client = TestClient(app)
    resp = client.post("/webhooks/msg91", json={"sender": SENDER, "message": "hello"})
    assert resp.status_code == 200
    assert platform.sent == [(SENDER, replies.INVALID_PHONE)]
