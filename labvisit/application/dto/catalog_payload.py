from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from labvisit.domain.entities.catalog import DEFAULT_CATEGORIES, CategoryEntry, TestCatalogEntry


class CategoryRecordDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    name_ar: str = Field(default="", validation_alias=AliasChoices("nameAr", "name_ar"))

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)

    def to_entity(self) -> CategoryEntry:
        return CategoryEntry(id=self.id, name=self.name, name_ar=self.name_ar)


class TestRecordDTO(BaseModel):
    """One test record from the content service.

    The content service has shipped two naming conventions over time
    (camelCase and the ERP's snake_case item fields); both map here.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = Field(default="", validation_alias=AliasChoices("name", "test_name"))
    name_ar: str = Field(default="", validation_alias=AliasChoices("nameAr", "name_ar", "test_name_ar"))
    code: str = Field(default="", validation_alias=AliasChoices("code", "test_code", "item_code"))
    category_id: str = Field(default="", validation_alias=AliasChoices("categoryId", "category_id", "category"))
    turnaround_time: str | None = Field(default=None, validation_alias=AliasChoices("turnaroundTime", "turnaround_time"))
    turnaround_time_ar: str | None = Field(
        default=None, validation_alias=AliasChoices("turnaroundTimeAr", "turnaround_time_ar")
    )
    requires_fasting: bool = Field(default=False, validation_alias=AliasChoices("requiresFasting", "requires_fasting"))
    description: str | None = None
    description_ar: str | None = Field(default=None, validation_alias=AliasChoices("descriptionAr", "description_ar"))

    @field_validator("id", "code", "category_id", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("name", "name_ar", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return value or ""

    @field_validator("requires_fasting", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        # ERP check fields arrive as 0/1
        return bool(value)

    def to_entity(self) -> TestCatalogEntry:
        return TestCatalogEntry(
            id=self.id,
            code=self.code,
            category_id=self.category_id,
            name=self.name,
            name_ar=self.name_ar,
            turnaround_time=self.turnaround_time,
            turnaround_time_ar=self.turnaround_time_ar,
            requires_fasting=self.requires_fasting,
            description=self.description,
            description_ar=self.description_ar,
        )


class CatalogPayloadDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    categories: list[CategoryRecordDTO] = Field(default_factory=list)
    tests: list[TestRecordDTO] = Field(default_factory=list)

    @classmethod
    def from_envelope(cls, data: Any) -> "CatalogPayloadDTO":
        """Unwrap `{message: {message: {...}}}`, `{message: {...}}` or a bare payload."""
        if not isinstance(data, dict):
            return cls()
        message = data.get("message")
        if isinstance(message, dict):
            inner = message.get("message")
            if isinstance(inner, dict) and "categories" in inner:
                return cls.model_validate(inner)
            if "categories" in message:
                return cls.model_validate(message)
        if "categories" in data or "tests" in data:
            return cls.model_validate(data)
        return cls()

    def to_entities(self) -> tuple[list[CategoryEntry], list[TestCatalogEntry]]:
        categories = [c.to_entity() for c in self.categories] or list(DEFAULT_CATEGORIES)
        return categories, [t.to_entity() for t in self.tests]
