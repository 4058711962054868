from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any

from labvisit.application.exceptions import AttachmentError, WizardStateError
from labvisit.application.ports.attachment_compressor import AttachmentCompressorPort
from labvisit.application.use_cases.booking_submission import BookingSubmitter
from labvisit.application.use_cases.booking_summary import BookingSummary, build_summary
from labvisit.application.use_cases.catalog_index import CatalogIndex
from labvisit.application.use_cases.step_validation import StepValidators
from labvisit.application.utils.messages import normalize_locale, translate
from labvisit.domain.entities.booking_draft import DRAFT_FIELDS, Attachment, BookingDraft, LocationType
from labvisit.domain.entities.submission import CompressionResult, SubmissionOutcome
from labvisit.domain.entities.wizard_state import FIRST_STEP, LAST_STEP, WizardStatus, WizardStep


class WizardController:
    """
    Four-step booking wizard for one session.
    Owns the draft, the active step, the field error map and the submission banner.
    """

    def __init__(
        self,
        catalog: CatalogIndex,
        compressor: AttachmentCompressorPort,
        submitter: BookingSubmitter,
        validators: StepValidators | None = None,
        locale: str = "en",
        deep_link: str | None = None,
    ) -> None:
        self._catalog = catalog
        self._compressor = compressor
        self._submitter = submitter
        self._validators = validators or StepValidators()
        self._locale = normalize_locale(locale)
        self._logger = logging.getLogger(__name__)

        self._draft = BookingDraft(selected_tests=self._seed_selection(deep_link))
        self._current_step = FIRST_STEP
        self._direction = 1
        self._status = WizardStatus.editing
        self._errors: dict[str, str] = {}
        self._submit_error: str | None = None
        self._attachment_error: str | None = None
        self._compression: asyncio.Future[CompressionResult] | None = None
        self._compression_source: Attachment | None = None

    @property
    def draft(self) -> BookingDraft:
        return self._draft

    @property
    def catalog(self) -> CatalogIndex:
        return self._catalog

    @property
    def current_step(self) -> int:
        return int(self._current_step)

    @property
    def direction(self) -> int:
        return self._direction

    @property
    def status(self) -> WizardStatus:
        return self._status

    @property
    def is_submitting(self) -> bool:
        return self._status is WizardStatus.submitting

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def submit_error(self) -> str | None:
        return self._submit_error

    @property
    def attachment_error(self) -> str | None:
        return self._attachment_error

    @property
    def locale(self) -> str:
        return self._locale

    def set_locale(self, locale: str) -> None:
        self._locale = normalize_locale(locale)

    def update_field(self, **fields: Any) -> None:
        self._ensure_not_finished()
        unknown = set(fields) - DRAFT_FIELDS
        if unknown:
            raise ValueError(f"Unknown booking fields: {', '.join(sorted(unknown))}")

        if "location_type" in fields:
            fields["location_type"] = LocationType(fields["location_type"])
        if "selected_tests" in fields:
            fields["selected_tests"] = tuple(dict.fromkeys(fields["selected_tests"] or ()))
        if "prescription_attachment" in fields:
            self._attachment_error = None
            if fields["prescription_attachment"] is None:
                self._compression = None
                self._compression_source = None

        self._draft = replace(self._draft, **fields)
        for key in fields:
            self._errors.pop(key, None)

    def toggle_test(self, test_id: str) -> bool:
        """Add or remove a test by its catalog id. Returns True if it is now selected."""
        selected = self._draft.selected_tests
        if test_id in selected:
            self.update_field(selected_tests=tuple(t for t in selected if t != test_id))
            return False
        self.update_field(selected_tests=selected + (test_id,))
        return True

    def next(self) -> bool:
        self._ensure_editing()
        if self._current_step == LAST_STEP:
            return False

        gate = self._validators.evaluate(self._current_step, self._draft)
        if self._current_step == WizardStep.LOCATION:
            self._errors = dict(gate.errors)
        if not gate.passed:
            self._logger.info(
                "Step gate refused",
                extra={"step": int(self._current_step), "fields": sorted(gate.errors)},
            )
            return False

        self._direction = 1
        self._current_step = WizardStep(min(self._current_step + 1, LAST_STEP))
        return True

    def back(self) -> bool:
        self._ensure_editing()
        if self._current_step == FIRST_STEP:
            return False
        self._direction = -1
        self._current_step = WizardStep(max(self._current_step - 1, FIRST_STEP))
        return True

    async def attach_prescription(self, attachment: Attachment) -> CompressionResult:
        """Store the file on the draft and wait for its transport encoding."""
        self.update_field(prescription_attachment=attachment)
        try:
            return await self._settled_compression(attachment)
        except AttachmentError as e:
            self._drop_attachment(attachment, e)
            raise

    async def confirm(self) -> SubmissionOutcome:
        if self._status is WizardStatus.submitting:
            raise WizardStateError("A booking submission is already in progress")
        self._ensure_editing()
        if self._current_step != WizardStep.CONFIRM:
            raise WizardStateError("Booking can only be confirmed from the confirmation step")

        draft = self._draft
        locale = self._locale
        test_names = self._catalog.display_names(draft.selected_tests, locale)

        self._status = WizardStatus.submitting
        self._submit_error = None
        try:
            outcome = await self._submit_snapshot(draft, test_names, locale)
        except BaseException:
            self._status = WizardStatus.editing
            raise

        if outcome.success:
            self._status = WizardStatus.success
            self._logger.info("Booking confirmed", extra={"tests": len(test_names)})
        else:
            self._status = WizardStatus.editing
            self._submit_error = outcome.message
        return outcome

    def dismiss_error(self) -> None:
        self._submit_error = None

    def restart(self) -> None:
        if self._status is WizardStatus.submitting:
            raise WizardStateError("Cannot restart while a booking submission is in progress")
        self._draft = BookingDraft()
        self._current_step = FIRST_STEP
        self._direction = 1
        self._status = WizardStatus.editing
        self._errors = {}
        self._submit_error = None
        self._attachment_error = None
        self._compression = None
        self._compression_source = None

    def summary(self) -> BookingSummary:
        return build_summary(self._draft, self._catalog, self._locale)

    def _seed_selection(self, deep_link: str | None) -> tuple[str, ...]:
        match = self._catalog.find(deep_link)
        if match is None:
            if deep_link:
                self._logger.info("Deep link did not match any test", extra={"reason": deep_link})
            return ()
        return (match.id,)

    async def _submit_snapshot(
        self, draft: BookingDraft, test_names: list[str], locale: str
    ) -> SubmissionOutcome:
        try:
            compression = await self._settled_compression(draft.prescription_attachment)
        except AttachmentError as e:
            self._drop_attachment(draft.prescription_attachment, e)
            return SubmissionOutcome.failed(translate(f"attachment.{e.code}", locale), kind="attachment")
        return await self._submitter.submit(draft, test_names, compression, locale)

    async def _settled_compression(self, attachment: Attachment | None) -> CompressionResult | None:
        if attachment is None:
            return None
        if self._compression is None or self._compression_source is not attachment:
            self._compression = asyncio.ensure_future(self._compressor.compress(attachment))
            self._compression_source = attachment
        try:
            return await self._compression
        except BaseException:
            # A failed encoding is never reused; the next attempt starts over.
            if self._compression_source is attachment:
                self._compression = None
                self._compression_source = None
            raise

    def _drop_attachment(self, attachment: Attachment | None, error: AttachmentError) -> None:
        if attachment is not None and self._draft.prescription_attachment is attachment:
            self._draft = replace(self._draft, prescription_attachment=None)
        if self._compression_source is attachment:
            self._compression = None
            self._compression_source = None
        self._attachment_error = error.code
        self._logger.warning("Attachment rejected", extra={"reason": error.code})

    def _ensure_editing(self) -> None:
        self._ensure_not_finished()
        if self._status is WizardStatus.submitting:
            raise WizardStateError("Navigation is disabled while a booking submission is in progress")

    def _ensure_not_finished(self) -> None:
        if self._status is WizardStatus.success:
            raise WizardStateError("Booking already submitted; restart to book again")
