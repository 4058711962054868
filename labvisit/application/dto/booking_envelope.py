from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

SUCCESS_MARKER = "success"


@dataclass(frozen=True)
class BookingReply:
    """Canonical view of the booking endpoint's answer."""

    success: bool
    message: str | None = None
    message_ar: str | None = None

    def localized_message(self, locale: str) -> str | None:
        if locale == "ar":
            return self.message_ar
        return self.message


class BookingEnvelopeDTO(BaseModel):
    """The endpoint wraps its result as `{message: {...}}`; older deployments answer `{status: ...}`."""

    model_config = ConfigDict(extra="ignore")

    status: str | None = None
    message: Any = None

    def to_reply(self) -> BookingReply:
        inner = self.message if isinstance(self.message, dict) else {}
        success = (
            self.status == SUCCESS_MARKER
            or inner.get("status") == SUCCESS_MARKER
            or inner.get("message") == SUCCESS_MARKER
        )

        text = inner.get("message") if inner else self.message
        text_ar = inner.get("messageAr") or inner.get("message_ar")
        return BookingReply(
            success=success,
            message=text if isinstance(text, str) and text != SUCCESS_MARKER else None,
            message_ar=text_ar if isinstance(text_ar, str) else None,
        )

    @classmethod
    def parse(cls, data: Any) -> BookingReply:
        if not isinstance(data, dict):
            return BookingReply(success=False)
        return cls.model_validate(data).to_reply()
