from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from labvisit.application.utils.messages import normalize_locale, translate

FIRST_SLOT_HOUR = 8
LAST_SLOT_HOUR = 24  # midnight

_WEEKDAYS = {
    "en": ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
    "ar": ("الاثنين", "الثلاثاء", "الأربعاء", "الخميس", "الجمعة", "السبت", "الأحد"),
}


@dataclass(frozen=True)
class DateOption:
    value: str  # YYYY-MM-DD
    label: str
    day: str


@dataclass(frozen=True)
class TimeSlotOption:
    value: str  # "08:00 AM"
    label: str


def upcoming_dates(today: date, locale: str, days: int = 4) -> list[DateOption]:
    """Today, tomorrow, then short weekday names."""
    locale = normalize_locale(locale)
    options: list[DateOption] = []
    for offset in range(days):
        current = today + timedelta(days=offset)
        if offset == 0:
            label = translate("schedule.today", locale)
        elif offset == 1:
            label = translate("schedule.tomorrow", locale)
        else:
            label = _WEEKDAYS[locale][current.weekday()]
        options.append(DateOption(value=current.isoformat(), label=label, day=f"{current.day:02d}"))
    return options


def time_slots(locale: str) -> list[TimeSlotOption]:
    locale = normalize_locale(locale)
    slots: list[TimeSlotOption] = []
    for h in range(FIRST_SLOT_HOUR, LAST_SLOT_HOUR + 1):
        hour = h % 24
        morning = h < 12 or h == LAST_SLOT_HOUR
        display_hour = hour % 12 or 12
        value = f"{display_hour:02d}:00 {'AM' if morning else 'PM'}"
        if locale == "ar":
            label = f"{display_hour}:00 {'ص' if morning else 'م'}"
        else:
            label = f"{display_hour}:00 {'AM' if morning else 'PM'}"
        slots.append(TimeSlotOption(value=value, label=label))
    return slots
