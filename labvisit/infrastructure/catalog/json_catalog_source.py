from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from labvisit.application.ports.catalog_source import CatalogSourcePort
from labvisit.core.config import settings


class JsonCatalogSource(CatalogSourcePort):
    """Catalog exported from the content service, read from disk."""

    def __init__(self, path: str | None = None) -> None:
        self._path = Path(path or settings.CATALOG_PATH)
        self._logger = logging.getLogger(__name__)

    def load(self) -> Any:
        if not self._path.exists():
            self._logger.warning("Catalog file missing", extra={"path": str(self._path)})
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            self._logger.error("Catalog file unreadable", extra={"path": str(self._path), "reason": str(e)})
            return {}
