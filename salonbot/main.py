import logging

from fastapi import FastAPI

from salonbot.api.bookings import router as bookings_router
from salonbot.api.chat import router as chat_router
from salonbot.api.webhooks import router as webhooks_router
from salonbot.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in (
            "message_id",
            "platform",
            "message_count",
            "phone",
            "step",
            "next_step",
            "action",
            "appointment_id",
            "recipient",
            "reply_text",
            "reason",
        ):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title=f"{settings.BUSINESS_NAME} Booking Chat", version="1.0.0")

app.include_router(chat_router, prefix="/api", tags=["chat"])
app.include_router(bookings_router, prefix="/api", tags=["appointments"])
app.include_router(webhooks_router, tags=["webhooks"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
