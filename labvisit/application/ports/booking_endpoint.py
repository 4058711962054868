from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BookingEndpointPort(ABC):
    @abstractmethod
    async def submit(self, payload: dict[str, Any]) -> Any:
        """POST the booking payload. Returns the decoded JSON body, raises BookingTransportError."""
        raise NotImplementedError
