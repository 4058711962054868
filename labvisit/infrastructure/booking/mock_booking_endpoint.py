from __future__ import annotations

import logging
from typing import Any

from labvisit.application.ports.booking_endpoint import BookingEndpointPort


class MockBookingEndpoint(BookingEndpointPort):
    def __init__(self, response: Any = None) -> None:
        self._response = response if response is not None else {"message": {"status": "success", "message": "success"}}
        self.submitted: list[dict[str, Any]] = []
        self._logger = logging.getLogger(__name__)

    async def submit(self, payload: dict[str, Any]) -> Any:
        self.submitted.append(payload)
        self._logger.info(
            "Mock booking submitted",
            extra={
                "tests": len(payload.get("selectedTests") or []),
                "with_attachment": payload.get("prescriptionFile") is not None,
            },
        )
        return self._response
