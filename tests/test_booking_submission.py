"""
Tests for payload assembly, the response envelope adapter and the httpx booking endpoint.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from labvisit.application.dto.booking_envelope import BookingEnvelopeDTO
from labvisit.application.exceptions import BookingTransportError
from labvisit.application.use_cases.booking_submission import BookingSubmitter, build_payload
from labvisit.core.config import settings
from labvisit.domain.entities.booking_draft import Attachment, BookingDraft, LocationType
from labvisit.domain.entities.submission import CompressionResult
from labvisit.infrastructure.booking.http_booking_endpoint import HttpBookingEndpoint
from labvisit.infrastructure.booking.mock_booking_endpoint import MockBookingEndpoint

DRAFT = BookingDraft(
    contact_name="Sara",
    phone="712345678",
    location_type=LocationType.office,
    address="Tower B, floor 3",
    selected_tests=("T-CBC",),
    visit_date="2026-10-20",
    visit_time_slot="09:00 AM",
)


class FailingEndpoint:
    async def submit(self, payload):
        raise BookingTransportError("connection refused")


def test_payload_has_the_wire_keys():
    payload = build_payload(DRAFT, ["Complete Blood Count"], None)

    assert payload == {
        "name": "Sara",
        "phone": "712345678",
        "locationType": "office",
        "address": "Tower B, floor 3",
        "date": "2026-10-20",
        "timeSlot": "09:00 AM",
        "selectedTests": ["Complete Blood Count"],
        "prescriptionFile": None,
        "prescriptionFileName": None,
    }


def test_payload_carries_encoded_attachment():
    attachment = Attachment(content=b"raw", filename="rx.jpg", media_type="image/jpeg")
    draft = BookingDraft(prescription_attachment=attachment)
    compression = CompressionResult(encoded_payload="data:image/jpeg;base64,AAAA", estimated_size_bytes=3, media_type="image/jpeg")

    payload = build_payload(draft, [], compression)

    assert payload["prescriptionFile"] == "data:image/jpeg;base64,AAAA"
    assert payload["prescriptionFileName"] == "rx.jpg"


@pytest.mark.parametrize(
    "body",
    [
        {"status": "success"},
        {"message": {"message": "success"}},
        {"message": {"status": "success", "message": "Booked"}},
    ],
)
def test_success_markers_are_equivalent(body):
    assert BookingEnvelopeDTO.parse(body).success is True


def test_rejection_keeps_both_localized_messages():
    reply = BookingEnvelopeDTO.parse(
        {"message": {"status": "error", "message": "Slot unavailable", "messageAr": "الموعد غير متاح"}}
    )

    assert reply.success is False
    assert reply.localized_message("en") == "Slot unavailable"
    assert reply.localized_message("ar") == "الموعد غير متاح"


def test_unknown_shapes_are_failures_without_message():
    assert BookingEnvelopeDTO.parse({"exc_type": "ValidationError"}).message is None
    assert BookingEnvelopeDTO.parse(["success"]).success is False
    assert BookingEnvelopeDTO.parse(None).success is False


def test_submitter_reports_success():
    endpoint = MockBookingEndpoint(response={"status": "success"})
    outcome = asyncio.run(BookingSubmitter(endpoint).submit(DRAFT, ["Complete Blood Count"], None, "en"))

    assert outcome.success is True
    assert endpoint.submitted[0]["selectedTests"] == ["Complete Blood Count"]


def test_submitter_prefers_endpoint_message():
    endpoint = MockBookingEndpoint(response={"message": {"status": "error", "message": "Slot unavailable", "messageAr": "الموعد غير متاح"}})
    outcome = asyncio.run(BookingSubmitter(endpoint).submit(DRAFT, [], None, "ar"))

    assert outcome.success is False
    assert outcome.kind == "application"
    assert outcome.message == "الموعد غير متاح"


def test_submitter_falls_back_to_generic_message():
    endpoint = MockBookingEndpoint(response={"message": {"status": "error"}})
    outcome = asyncio.run(BookingSubmitter(endpoint).submit(DRAFT, [], None, "en"))

    assert outcome.message == "An error occurred during submission"


def test_submitter_classifies_transport_failure():
    outcome = asyncio.run(BookingSubmitter(FailingEndpoint()).submit(DRAFT, [], None, "en"))

    assert outcome.success is False
    assert outcome.kind == "transport"
    assert outcome.message == "A network error occurred"


def test_http_endpoint_posts_json_to_submit_path():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"message": {"status": "success"}})

    endpoint = HttpBookingEndpoint(base_url="https://erp.example.com/", transport=httpx.MockTransport(handler))
    data = asyncio.run(endpoint.submit({"name": "Sara"}))

    assert data == {"message": {"status": "success"}}
    assert str(seen[0].url) == "https://erp.example.com/api/method/newlab_site.api.submit_home_visit"
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {"name": "Sara"}


def test_http_endpoint_returns_error_envelopes():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(417, json={"message": {"status": "error", "message": "Invalid phone"}})

    endpoint = HttpBookingEndpoint(base_url="https://erp.example.com", transport=httpx.MockTransport(handler))

    assert asyncio.run(endpoint.submit({}))["message"]["message"] == "Invalid phone"


def test_http_endpoint_wraps_network_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    endpoint = HttpBookingEndpoint(base_url="https://erp.example.com", transport=httpx.MockTransport(handler))

    with pytest.raises(BookingTransportError):
        asyncio.run(endpoint.submit({}))


def test_http_endpoint_treats_non_json_body_as_transport_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    endpoint = HttpBookingEndpoint(base_url="https://erp.example.com", transport=httpx.MockTransport(handler))

    with pytest.raises(BookingTransportError):
        asyncio.run(endpoint.submit({}))


def test_http_endpoint_requires_base_url(monkeypatch):
    monkeypatch.setattr(settings, "BOOKING_API_BASE_URL", None)

    with pytest.raises(ValueError):
        HttpBookingEndpoint()


class ResettingEndpoint:
    async def submit(self, payload):
        raise ConnectionResetError("peer reset the connection")


def test_submitter_treats_any_endpoint_error_as_network_failure():
    outcome = asyncio.run(BookingSubmitter(ResettingEndpoint()).submit(DRAFT, [], None, "ar"))

    assert outcome.success is False
    assert outcome.kind == "transport"
    assert outcome.message == "حدث خطأ في الاتصال بالخادم"
