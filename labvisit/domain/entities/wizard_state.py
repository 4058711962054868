from __future__ import annotations

from enum import Enum, IntEnum


class WizardStep(IntEnum):
    LOCATION = 1
    TESTS = 2
    SCHEDULE = 3
    CONFIRM = 4


class WizardStatus(str, Enum):
    editing = "editing"
    submitting = "submitting"
    success = "success"


FIRST_STEP = WizardStep.LOCATION
LAST_STEP = WizardStep.CONFIRM
