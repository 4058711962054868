from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CatalogSourcePort(ABC):
    @abstractmethod
    def load(self) -> Any:
        """Return the raw catalog payload supplied by the content service."""
        raise NotImplementedError
