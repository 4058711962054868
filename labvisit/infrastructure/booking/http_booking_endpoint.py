from __future__ import annotations

import logging
from typing import Any

import httpx

from labvisit.application.exceptions import BookingTransportError
from labvisit.application.ports.booking_endpoint import BookingEndpointPort
from labvisit.core.config import settings


class HttpBookingEndpoint(BookingEndpointPort):
    def __init__(
        self,
        base_url: str | None = None,
        submit_path: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.BOOKING_API_BASE_URL or "").rstrip("/")
        self._submit_path = submit_path or settings.BOOKING_SUBMIT_PATH
        self._timeout = timeout or settings.BOOKING_TIMEOUT_SECONDS
        self._transport = transport
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("BOOKING_API_BASE_URL is required for the booking endpoint")

    @property
    def url(self) -> str:
        return f"{self._base_url}{self._submit_path}"

    async def submit(self, payload: dict[str, Any]) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(self.url, json=payload, headers={"Content-Type": "application/json"})
        except httpx.HTTPError as e:
            raise BookingTransportError(f"Booking request did not complete: {e}") from e

        if resp.status_code >= 400:
            # Rejections still carry the envelope with the user-facing message.
            self._logger.warning(
                "Booking endpoint returned error status",
                extra={"status": resp.status_code, "url": self.url},
            )

        try:
            return resp.json()
        except ValueError as e:
            raise BookingTransportError(f"Booking endpoint returned a non-JSON body (status {resp.status_code})") from e
