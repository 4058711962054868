"""
End-to-end tests for the booking HTTP surface.
"""

from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from conftest import CATALOG_PAYLOAD, make_png
from labvisit.api.v1 import bookings
from labvisit.application.use_cases.booking_submission import BookingSubmitter
from labvisit.application.use_cases.catalog_index import CatalogIndex
from labvisit.application.use_cases.wizard import WizardController
from labvisit.infrastructure.booking.mock_booking_endpoint import MockBookingEndpoint
from labvisit.infrastructure.imaging.pillow_compressor import PillowAttachmentCompressor
from labvisit.infrastructure.store.memory_store import MemoryWizardSessionStore
from labvisit.main import ContextFormatter, app
from labvisit.wiring.dependencies import get_session_store


@pytest.fixture
def endpoint() -> MockBookingEndpoint:
    return MockBookingEndpoint(response={"message": {"status": "success", "message": "success"}})


@pytest.fixture
def client(monkeypatch, endpoint):
    catalog = CatalogIndex.from_payload(CATALOG_PAYLOAD)

    def build_wizard(locale=None, deep_link=None):
        return WizardController(
            catalog=catalog,
            compressor=PillowAttachmentCompressor(),
            submitter=BookingSubmitter(endpoint),
            locale=locale or "en",
            deep_link=deep_link,
        )

    store = MemoryWizardSessionStore()
    monkeypatch.setattr(bookings, "build_wizard", build_wizard)
    app.dependency_overrides[get_session_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _start(client: TestClient, **body) -> str:
    resp = client.post("/api/v1/bookings/sessions", json=body)
    assert resp.status_code == 201
    return resp.json()["session_id"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_unknown_session_is_404(client):
    assert client.get("/api/v1/bookings/sessions/nope").status_code == 404


def test_start_with_deep_link(client):
    resp = client.post("/api/v1/bookings/sessions", json={"locale": "ar", "test": "FBS"})
    state = resp.json()

    assert state["current_step"] == 1
    assert state["draft"]["selected_tests"] == ["T-FBS"]
    assert state["summary"]["tests"] == ["سكر الدم الصائم"]


def test_location_errors_are_localized(client):
    sid = _start(client)
    client.patch(f"/api/v1/bookings/sessions/{sid}/draft", json={"contact_name": "Sara", "phone": "512345", "address": "x"})

    resp = client.post(f"/api/v1/bookings/sessions/{sid}/next").json()

    assert resp["advanced"] is False
    assert resp["state"]["errors"] == {"phone": "invalid_phone"}
    assert resp["state"]["error_messages"]["phone"] == "Phone number must start with 7"


def test_catalog_view_filters_and_marks_selection(client):
    sid = _start(client)
    client.post(f"/api/v1/bookings/sessions/{sid}/tests/T-CBC/toggle")

    data = client.get(f"/api/v1/bookings/sessions/{sid}/catalog", params={"category": "hematology", "q": "blood"}).json()

    assert [t["id"] for t in data["tests"]] == ["T-CBC"]
    assert data["tests"][0]["selected"] is True
    assert [c["id"] for c in data["categories"]] == ["all", "hematology", "chemistry"]


def test_toggle_unknown_test_is_404(client):
    sid = _start(client)

    assert client.post(f"/api/v1/bookings/sessions/{sid}/tests/NOPE/toggle").status_code == 404


def test_schedule_options(client):
    sid = _start(client)

    data = client.get(f"/api/v1/bookings/sessions/{sid}/schedule").json()

    assert len(data["dates"]) == 4
    assert data["dates"][0]["label"] == "Today"
    assert data["time_slots"][0]["value"] == "08:00 AM"
    assert data["time_slots"][-1]["value"] == "12:00 AM"


def test_bad_upload_is_422(client):
    sid = _start(client)

    resp = client.post(
        f"/api/v1/bookings/sessions/{sid}/attachment",
        files={"file": ("rx.png", b"not an image", "image/png")},
    )

    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "decode_failure"


def test_full_booking_flow(client, endpoint):
    sid = _start(client)
    base = f"/api/v1/bookings/sessions/{sid}"

    client.patch(f"{base}/draft", json={"contact_name": "Sara", "phone": "712345678", "address": "Street 1", "location_type": "office"})
    assert client.post(f"{base}/next").json()["advanced"] is True

    upload = client.post(f"{base}/attachment", files={"file": ("rx.png", make_png(3200, 1600), "image/png")})
    assert upload.status_code == 200
    assert (upload.json()["width"], upload.json()["height"]) == (1600, 800)
    assert client.post(f"{base}/next").json()["advanced"] is True

    client.patch(f"{base}/draft", json={"visit_date": "2026-10-20", "visit_time_slot": "09:00 AM"})
    assert client.post(f"{base}/next").json()["state"]["current_step"] == 4

    resp = client.post(f"{base}/confirm").json()

    assert resp["success"] is True
    assert resp["state"]["status"] == "success"
    payload = endpoint.submitted[0]
    assert payload["locationType"] == "office"
    assert payload["prescriptionFileName"] == "rx.png"
    assert payload["prescriptionFile"].startswith("data:image/jpeg;base64,")

    assert client.patch(f"{base}/draft", json={"phone": "7"}).status_code == 409
    assert client.post(f"{base}/restart").json()["current_step"] == 1


def test_confirm_before_last_step_is_409(client):
    sid = _start(client)

    assert client.post(f"/api/v1/bookings/sessions/{sid}/confirm").status_code == 409


def test_state_reports_text_direction(client):
    assert client.post("/api/v1/bookings/sessions", json={"locale": "ar"}).json()["rtl"] is True
    sid = _start(client, locale="en")

    assert client.get(f"/api/v1/bookings/sessions/{sid}").json()["rtl"] is False


def test_context_formatter_renders_logged_fields():
    record = logging.LogRecord("labvisit", logging.INFO, __file__, 1, "Booking submitted", None, None)
    record.tests = 2
    record.with_attachment = True
    record.original_bytes = 5000
    record.url = "https://erp.example.com/submit"
    record.fields = ["phone"]

    line = ContextFormatter("%(levelname)s:%(name)s:%(message)s").format(record)

    assert line.startswith("INFO:labvisit:Booking submitted | ")
    for part in ("tests=2", "with_attachment=True", "original_bytes=5000", "url=https://erp.example.com/submit", "fields=['phone']"):
        assert part in line
