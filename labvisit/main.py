import logging

from fastapi import FastAPI

from labvisit.api.v1.bookings import router as bookings_router
from labvisit.core.config import settings


LOG_CONTEXT_KEYS = (
    "session_id",
    "step",
    "fields",
    "language",
    "status",
    "tests",
    "with_attachment",
    "attachment",
    "original_bytes",
    "estimated_bytes",
    "quality",
    "path",
    "url",
    "reason",
)


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in LOG_CONTEXT_KEYS:
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

app = FastAPI(title="Home Visit Booking", version="1.0.0")

app.include_router(bookings_router, prefix="/api/v1/bookings", tags=["bookings"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
