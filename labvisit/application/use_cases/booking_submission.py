from __future__ import annotations

import logging
from typing import Any

from labvisit.application.dto.booking_envelope import BookingEnvelopeDTO
from labvisit.application.exceptions import BookingTransportError
from labvisit.application.ports.booking_endpoint import BookingEndpointPort
from labvisit.application.utils.messages import normalize_locale, translate
from labvisit.domain.entities.booking_draft import BookingDraft
from labvisit.domain.entities.submission import CompressionResult, SubmissionOutcome


def build_payload(
    draft: BookingDraft,
    selected_test_names: list[str],
    compression: CompressionResult | None,
) -> dict[str, Any]:
    attachment = draft.prescription_attachment if compression is not None else None
    return {
        "name": draft.contact_name,
        "phone": draft.phone,
        "locationType": draft.location_type.value,
        "address": draft.address,
        "date": draft.visit_date,
        "timeSlot": draft.visit_time_slot,
        "selectedTests": list(selected_test_names),
        "prescriptionFile": compression.encoded_payload if compression is not None else None,
        "prescriptionFileName": attachment.filename if attachment is not None else None,
    }


class BookingSubmitter:
    """Send a finalized draft to the booking endpoint and classify the answer."""

    def __init__(self, endpoint: BookingEndpointPort) -> None:
        self._endpoint = endpoint
        self._logger = logging.getLogger(__name__)

    async def submit(
        self,
        draft: BookingDraft,
        selected_test_names: list[str],
        compression: CompressionResult | None,
        locale: str,
    ) -> SubmissionOutcome:
        locale = normalize_locale(locale)
        payload = build_payload(draft, selected_test_names, compression)

        try:
            data = await self._endpoint.submit(payload)
        except BookingTransportError as e:
            self._logger.error("Booking request failed", extra={"reason": str(e)})
            return SubmissionOutcome.failed(translate("submission.network_error", locale), kind="transport")
        except Exception as e:
            self._logger.exception("Booking endpoint raised unexpectedly", extra={"reason": type(e).__name__})
            return SubmissionOutcome.failed(translate("submission.network_error", locale), kind="transport")

        reply = BookingEnvelopeDTO.parse(data)
        if reply.success:
            self._logger.info(
                "Booking submitted",
                extra={"tests": len(payload["selectedTests"]), "with_attachment": compression is not None},
            )
            return SubmissionOutcome.succeeded()

        message = reply.localized_message(locale) or translate("submission.error", locale)
        self._logger.warning("Booking rejected by endpoint", extra={"reason": message})
        return SubmissionOutcome.failed(message, kind="application")
