from __future__ import annotations

from dataclasses import dataclass, field

from labvisit.application.use_cases.catalog_index import CatalogIndex
from labvisit.application.utils.messages import normalize_locale, translate
from labvisit.domain.entities.booking_draft import BookingDraft


@dataclass(frozen=True)
class BookingSummary:
    contact_name: str
    phone: str
    location_type: str
    location_label: str
    address: str
    tests: list[str] = field(default_factory=list)
    prescription_filename: str | None = None
    schedule: str | None = None


def build_summary(draft: BookingDraft, catalog: CatalogIndex, locale: str) -> BookingSummary:
    locale = normalize_locale(locale)
    attachment = draft.prescription_attachment

    # An uploaded prescription replaces the test list in the summary.
    tests = [] if attachment is not None else catalog.display_names(draft.selected_tests, locale)

    schedule = None
    if draft.visit_date and draft.visit_time_slot:
        joiner = " - " if locale == "ar" else " at "
        schedule = f"{draft.visit_date}{joiner}{draft.visit_time_slot}"

    return BookingSummary(
        contact_name=draft.contact_name,
        phone=draft.phone,
        location_type=draft.location_type.value,
        location_label=translate(f"location.{draft.location_type.value}", locale),
        address=draft.address,
        tests=tests,
        prescription_filename=attachment.filename if attachment is not None else None,
        schedule=schedule,
    )
