from __future__ import annotations

from dataclasses import dataclass

ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class CategoryEntry:
    id: str
    name: str
    name_ar: str


@dataclass(frozen=True)
class TestCatalogEntry:
    id: str
    code: str
    category_id: str
    name: str
    name_ar: str
    turnaround_time: str | None = None
    turnaround_time_ar: str | None = None
    requires_fasting: bool = False
    description: str | None = None
    description_ar: str | None = None


DEFAULT_CATEGORIES: tuple[CategoryEntry, ...] = (CategoryEntry(id=ALL_CATEGORIES, name="All", name_ar="الكل"),)
