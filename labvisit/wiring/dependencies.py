from functools import lru_cache
import logging

from labvisit.core.config import settings
from labvisit.application.ports.attachment_compressor import AttachmentCompressorPort
from labvisit.application.ports.booking_endpoint import BookingEndpointPort
from labvisit.application.ports.session_store import WizardSessionStorePort
from labvisit.application.use_cases.booking_submission import BookingSubmitter
from labvisit.application.use_cases.catalog_index import CatalogIndex
from labvisit.application.use_cases.step_validation import StepValidators
from labvisit.application.use_cases.wizard import WizardController
from labvisit.infrastructure.booking.http_booking_endpoint import HttpBookingEndpoint
from labvisit.infrastructure.booking.mock_booking_endpoint import MockBookingEndpoint
from labvisit.infrastructure.catalog.json_catalog_source import JsonCatalogSource
from labvisit.infrastructure.imaging.pillow_compressor import PillowAttachmentCompressor
from labvisit.infrastructure.store.memory_store import MemoryWizardSessionStore


_session_store: WizardSessionStorePort | None = None


def get_session_store() -> WizardSessionStorePort:
    global _session_store
    if _session_store is None:
        _session_store = MemoryWizardSessionStore()
    return _session_store


@lru_cache
def get_catalog() -> CatalogIndex:
    logger = logging.getLogger(__name__)
    catalog = CatalogIndex.from_payload(JsonCatalogSource().load())
    logger.info(
        "Catalog loaded categories=%s tests=%s",
        len(catalog.categories),
        len(catalog.tests),
    )
    return catalog


@lru_cache
def get_booking_endpoint() -> BookingEndpointPort:
    logger = logging.getLogger(__name__)
    if not settings.BOOKING_API_BASE_URL:
        if settings.ENV.lower() in {"dev", "local"}:
            logger.info("Using MockBookingEndpoint (BOOKING_API_BASE_URL missing, ENV=dev/local)")
            return MockBookingEndpoint()
        raise ValueError("BOOKING_API_BASE_URL is required to submit bookings.")
    return HttpBookingEndpoint()


def get_compressor() -> AttachmentCompressorPort:
    return PillowAttachmentCompressor()


def get_validators() -> StepValidators:
    return StepValidators(phone_prefix=settings.PHONE_PREFIX)


def build_wizard(locale: str | None = None, deep_link: str | None = None) -> WizardController:
    return WizardController(
        catalog=get_catalog(),
        compressor=get_compressor(),
        submitter=BookingSubmitter(endpoint=get_booking_endpoint()),
        validators=get_validators(),
        locale=locale or settings.DEFAULT_LOCALE,
        deep_link=deep_link,
    )
