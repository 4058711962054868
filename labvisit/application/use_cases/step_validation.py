from __future__ import annotations

from dataclasses import dataclass, field

from labvisit.domain.entities.booking_draft import BookingDraft
from labvisit.domain.entities.wizard_state import WizardStep

REQUIRED = "required"
INVALID_PHONE = "invalid_phone"


@dataclass(frozen=True)
class GateResult:
    """Outcome of a step gate.

    `passed` is the step completion predicate. `errors` is the field error map,
    only ever populated by the location step.
    """

    passed: bool
    errors: dict[str, str] = field(default_factory=dict)


class StepValidators:
    """Per-step gates evaluated by the wizard on every `next()`."""

    def __init__(self, phone_prefix: str = "7") -> None:
        self._phone_prefix = phone_prefix

    def location_errors(self, draft: BookingDraft) -> dict[str, str]:
        errors: dict[str, str] = {}
        if not draft.contact_name.strip():
            errors["contact_name"] = REQUIRED
        if not draft.phone.strip():
            errors["phone"] = REQUIRED
        elif not draft.phone.startswith(self._phone_prefix):
            errors["phone"] = INVALID_PHONE
        if not draft.address.strip():
            errors["address"] = REQUIRED
        return errors

    def tests_complete(self, draft: BookingDraft) -> bool:
        return bool(draft.selected_tests) or draft.prescription_attachment is not None

    def schedule_complete(self, draft: BookingDraft) -> bool:
        return bool(draft.visit_date) and bool(draft.visit_time_slot)

    def evaluate(self, step: int, draft: BookingDraft) -> GateResult:
        if step == WizardStep.LOCATION:
            errors = self.location_errors(draft)
            return GateResult(passed=not errors, errors=errors)
        if step == WizardStep.TESTS:
            return GateResult(passed=self.tests_complete(draft))
        if step == WizardStep.SCHEDULE:
            return GateResult(passed=self.schedule_complete(draft))
        # Confirmation has no input gate.
        return GateResult(passed=True)
