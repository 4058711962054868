from __future__ import annotations

SUPPORTED_LOCALES = ("en", "ar")

_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "validation.required": "This field is required",
        "validation.invalid_phone": "Phone number must start with 7",
        "submission.error": "An error occurred during submission",
        "submission.network_error": "A network error occurred",
        "attachment.decode_failure": "Failed to load image for compression",
        "attachment.size_exceeded": "File size exceeds 2MB limit",
        "schedule.today": "Today",
        "schedule.tomorrow": "Tomorrow",
        "location.home": "Home",
        "location.office": "Office",
    },
    "ar": {
        "validation.required": "هذا الحقل مطلوب",
        "validation.invalid_phone": "يجب أن يبدأ رقم الهاتف بالرقم 7",
        "submission.error": "حدث خطأ أثناء الإرسال",
        "submission.network_error": "حدث خطأ في الاتصال بالخادم",
        "attachment.decode_failure": "تعذر تحميل الصورة لضغطها",
        "attachment.size_exceeded": "حجم الملف يتجاوز الحد المسموح 2 ميغابايت",
        "schedule.today": "اليوم",
        "schedule.tomorrow": "غداً",
        "location.home": "المنزل",
        "location.office": "المكتب",
    },
}


def normalize_locale(locale: str | None) -> str:
    if locale and locale.lower().startswith("ar"):
        return "ar"
    return "en"


def translate(key: str, locale: str | None) -> str:
    table = _MESSAGES[normalize_locale(locale)]
    return table.get(key) or _MESSAGES["en"].get(key, key)


def is_rtl(locale: str | None) -> bool:
    return normalize_locale(locale) == "ar"
