from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LocationType(str, Enum):
    home = "home"
    office = "office"


@dataclass(frozen=True)
class Attachment:
    content: bytes
    filename: str
    media_type: str | None = None  # declared by the uploader, may be missing

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class BookingDraft:
    contact_name: str = ""
    phone: str = ""
    location_type: LocationType = LocationType.home
    address: str = ""
    selected_tests: tuple[str, ...] = ()  # stable catalog test ids
    prescription_attachment: Attachment | None = None
    visit_date: str = ""  # YYYY-MM-DD
    visit_time_slot: str = ""  # e.g. "08:00 AM"


DRAFT_FIELDS = frozenset(
    (
        "contact_name",
        "phone",
        "location_type",
        "address",
        "selected_tests",
        "prescription_attachment",
        "visit_date",
        "visit_time_slot",
    )
)
