"""
Tests for the context log formatter.
"""

import logging

from salonbot.main import ContextFormatter


def test_context_formatter_renders_channel_extras():
    record = logging.makeLogRecord(
        {
            "name": "salonbot.test",
            "levelname": "INFO",
            "msg": "Inbound message",
            "platform": "whatsapp",
            "message_count": 2,
            "reply_text": "hello",
            "phone": "9876543210",
        }
    )
    line = ContextFormatter("%(levelname)s:%(name)s:%(message)s").format(record)
    assert line.startswith("INFO:salonbot.test:Inbound message | ")
    assert "platform=whatsapp" in line
    assert "message_count=2" in line
    assert "reply_text=hello" in line
    assert "phone=9876543210" in line


def test_context_formatter_skips_empty_values():
    record = logging.makeLogRecord({"name": "salonbot.test", "levelname": "INFO", "msg": "Turn handled", "phone": ""})
    assert ContextFormatter("%(message)s").format(record) == "Turn handled"
