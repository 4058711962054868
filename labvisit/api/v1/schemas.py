from pydantic import BaseModel, Field

from labvisit.application.use_cases.wizard import WizardController
from labvisit.application.utils.messages import is_rtl, translate
from labvisit.domain.entities.booking_draft import LocationType


class StartSessionSchema(BaseModel):
    locale: str = "en"
    test: str | None = None  # deep link: catalog test id or code


class LocaleSchema(BaseModel):
    locale: str


class DraftUpdateSchema(BaseModel):
    contact_name: str | None = None
    phone: str | None = None
    location_type: LocationType | None = None
    address: str | None = None
    selected_tests: list[str] | None = None
    visit_date: str | None = None
    visit_time_slot: str | None = None


class DraftSchema(BaseModel):
    contact_name: str
    phone: str
    location_type: LocationType
    address: str
    selected_tests: list[str]
    prescription_filename: str | None = None
    visit_date: str
    visit_time_slot: str


class SummarySchema(BaseModel):
    contact_name: str
    phone: str
    location_type: str
    location_label: str
    address: str
    tests: list[str] = Field(default_factory=list)
    prescription_filename: str | None = None
    schedule: str | None = None


class WizardStateSchema(BaseModel):
    session_id: str
    current_step: int
    direction: int
    status: str
    locale: str
    rtl: bool = False
    errors: dict[str, str] = Field(default_factory=dict)
    error_messages: dict[str, str] = Field(default_factory=dict)
    submit_error: str | None = None
    attachment_error: str | None = None
    draft: DraftSchema
    summary: SummarySchema

    @classmethod
    def from_controller(cls, session_id: str, wizard: WizardController) -> "WizardStateSchema":
        draft = wizard.draft
        summary = wizard.summary()
        attachment = draft.prescription_attachment
        errors = wizard.errors
        return cls(
            session_id=session_id,
            current_step=wizard.current_step,
            direction=wizard.direction,
            status=wizard.status.value,
            locale=wizard.locale,
            rtl=is_rtl(wizard.locale),
            errors=errors,
            error_messages={field: translate(f"validation.{code}", wizard.locale) for field, code in errors.items()},
            submit_error=wizard.submit_error,
            attachment_error=wizard.attachment_error,
            draft=DraftSchema(
                contact_name=draft.contact_name,
                phone=draft.phone,
                location_type=draft.location_type,
                address=draft.address,
                selected_tests=list(draft.selected_tests),
                prescription_filename=attachment.filename if attachment is not None else None,
                visit_date=draft.visit_date,
                visit_time_slot=draft.visit_time_slot,
            ),
            summary=SummarySchema(
                contact_name=summary.contact_name,
                phone=summary.phone,
                location_type=summary.location_type,
                location_label=summary.location_label,
                address=summary.address,
                tests=summary.tests,
                prescription_filename=summary.prescription_filename,
                schedule=summary.schedule,
            ),
        )


class NavigationResponseSchema(BaseModel):
    advanced: bool
    state: WizardStateSchema


class AttachmentResponseSchema(BaseModel):
    estimated_size_bytes: int
    media_type: str
    width: int | None = None
    height: int | None = None
    quality: int | None = None
    state: WizardStateSchema


class ConfirmResponseSchema(BaseModel):
    success: bool
    message: str | None = None
    state: WizardStateSchema


class CategorySchema(BaseModel):
    id: str
    label: str


class CatalogTestSchema(BaseModel):
    id: str
    code: str
    category_id: str
    label: str
    selected: bool
    requires_fasting: bool = False
    turnaround_time: str | None = None


class CatalogResponseSchema(BaseModel):
    categories: list[CategorySchema]
    tests: list[CatalogTestSchema]


class DateOptionSchema(BaseModel):
    value: str
    label: str
    day: str


class TimeSlotSchema(BaseModel):
    value: str
    label: str


class ScheduleResponseSchema(BaseModel):
    dates: list[DateOptionSchema]
    time_slots: list[TimeSlotSchema]
