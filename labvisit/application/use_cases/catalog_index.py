from __future__ import annotations

from typing import Any, Iterable

from labvisit.application.dto.catalog_payload import CatalogPayloadDTO
from labvisit.application.utils.messages import normalize_locale
from labvisit.domain.entities.catalog import ALL_CATEGORIES, DEFAULT_CATEGORIES, CategoryEntry, TestCatalogEntry


class CatalogIndex:
    """Read-only, filterable view over the category and test reference data."""

    def __init__(self, categories: Iterable[CategoryEntry], tests: Iterable[TestCatalogEntry]) -> None:
        self._categories = tuple(categories) or DEFAULT_CATEGORIES
        self._tests = tuple(tests)
        self._by_id = {test.id: test for test in self._tests}

    @classmethod
    def from_payload(cls, data: Any) -> "CatalogIndex":
        categories, tests = CatalogPayloadDTO.from_envelope(data).to_entities()
        return cls(categories, tests)

    @property
    def categories(self) -> tuple[CategoryEntry, ...]:
        return self._categories

    @property
    def tests(self) -> tuple[TestCatalogEntry, ...]:
        return self._tests

    def filter(self, category_id: str = ALL_CATEGORIES, query: str = "") -> list[TestCatalogEntry]:
        """Tests in the category (or all) whose name, Arabic name or code contains the query."""
        needle = query.casefold()
        return [
            test
            for test in self._tests
            if (category_id == ALL_CATEGORIES or test.category_id == category_id)
            and (query == "" or _matches(test, needle))
        ]

    def get(self, test_id: str) -> TestCatalogEntry | None:
        return self._by_id.get(test_id)

    def find(self, id_or_code: str | None) -> TestCatalogEntry | None:
        if not id_or_code:
            return None
        if id_or_code in self._by_id:
            return self._by_id[id_or_code]
        for test in self._tests:
            if test.code and test.code == id_or_code:
                return test
        return None

    def display_name(self, test_id: str, locale: str | None) -> str:
        test = self._by_id.get(test_id)
        if test is None:
            return test_id
        if normalize_locale(locale) == "ar":
            return test.name_ar or test.name or test.id
        return test.name or test.name_ar or test.id

    def display_names(self, test_ids: Iterable[str], locale: str | None) -> list[str]:
        return [self.display_name(test_id, locale) for test_id in test_ids]

    def category_label(self, category_id: str, locale: str | None) -> str:
        for category in self._categories:
            if category.id == category_id:
                if normalize_locale(locale) == "ar":
                    return category.name_ar or category.name
                return category.name or category.name_ar
        return category_id


def _matches(test: TestCatalogEntry, needle: str) -> bool:
    return (
        needle in test.name.casefold()
        or needle in test.name_ar.casefold()
        or needle in test.code.casefold()
    )
