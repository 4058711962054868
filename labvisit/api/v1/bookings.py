from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from labvisit.api.v1.schemas import (
    AttachmentResponseSchema,
    CatalogResponseSchema,
    CatalogTestSchema,
    CategorySchema,
    ConfirmResponseSchema,
    DateOptionSchema,
    DraftUpdateSchema,
    LocaleSchema,
    NavigationResponseSchema,
    ScheduleResponseSchema,
    StartSessionSchema,
    TimeSlotSchema,
    WizardStateSchema,
)
from labvisit.application.exceptions import AttachmentError, WizardStateError
from labvisit.application.ports.session_store import WizardSessionStorePort
from labvisit.application.use_cases.wizard import WizardController
from labvisit.application.utils.messages import translate
from labvisit.application.utils.schedule_options import time_slots, upcoming_dates
from labvisit.domain.entities.booking_draft import Attachment
from labvisit.domain.entities.catalog import ALL_CATEGORIES
from labvisit.wiring.dependencies import build_wizard, get_session_store

router = APIRouter()
logger = logging.getLogger(__name__)


def get_wizard(
    session_id: str,
    store: WizardSessionStorePort = Depends(get_session_store),
) -> WizardController:
    wizard = store.get(session_id)
    if wizard is None:
        raise HTTPException(status_code=404, detail="Booking session not found")
    return wizard


def _state(session_id: str, wizard: WizardController) -> WizardStateSchema:
    return WizardStateSchema.from_controller(session_id, wizard)


@router.post("/sessions", response_model=WizardStateSchema, status_code=201)
async def start_session(
    req: StartSessionSchema,
    store: WizardSessionStorePort = Depends(get_session_store),
):
    try:
        wizard = build_wizard(locale=req.locale, deep_link=req.test)
    except ValueError as e:
        logger.exception("Failed to initialize booking wizard", extra={"reason": str(e)})
        raise HTTPException(status_code=503, detail=str(e))
    session_id = store.create(wizard)
    logger.info("Booking session started", extra={"session_id": session_id, "language": wizard.locale})
    return _state(session_id, wizard)


@router.get("/sessions/{session_id}", response_model=WizardStateSchema)
async def get_session(session_id: str, wizard: WizardController = Depends(get_wizard)):
    return _state(session_id, wizard)


@router.patch("/sessions/{session_id}/draft", response_model=WizardStateSchema)
async def update_draft(
    session_id: str,
    req: DraftUpdateSchema,
    wizard: WizardController = Depends(get_wizard),
):
    try:
        wizard.update_field(**req.model_dump(exclude_unset=True, exclude_none=True))
    except WizardStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/tests/{test_id}/toggle", response_model=WizardStateSchema)
async def toggle_test(session_id: str, test_id: str, wizard: WizardController = Depends(get_wizard)):
    if wizard.catalog.get(test_id) is None and test_id not in wizard.draft.selected_tests:
        raise HTTPException(status_code=404, detail="Test not found in catalog")
    try:
        wizard.toggle_test(test_id)
    except WizardStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/attachment", response_model=AttachmentResponseSchema)
async def upload_attachment(
    session_id: str,
    file: UploadFile = File(...),
    wizard: WizardController = Depends(get_wizard),
):
    content = await file.read()
    attachment = Attachment(content=content, filename=file.filename or "prescription", media_type=file.content_type)
    try:
        result = await wizard.attach_prescription(attachment)
    except AttachmentError as e:
        raise HTTPException(
            status_code=422,
            detail={"code": e.code, "message": translate(f"attachment.{e.code}", wizard.locale)},
        )
    except WizardStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return AttachmentResponseSchema(
        estimated_size_bytes=result.estimated_size_bytes,
        media_type=result.media_type,
        width=result.width,
        height=result.height,
        quality=result.quality,
        state=_state(session_id, wizard),
    )


@router.delete("/sessions/{session_id}/attachment", response_model=WizardStateSchema)
async def remove_attachment(session_id: str, wizard: WizardController = Depends(get_wizard)):
    try:
        wizard.update_field(prescription_attachment=None)
    except WizardStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/next", response_model=NavigationResponseSchema)
async def next_step(session_id: str, wizard: WizardController = Depends(get_wizard)):
    try:
        advanced = wizard.next()
    except WizardStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return NavigationResponseSchema(advanced=advanced, state=_state(session_id, wizard))


@router.post("/sessions/{session_id}/back", response_model=NavigationResponseSchema)
async def previous_step(session_id: str, wizard: WizardController = Depends(get_wizard)):
    try:
        moved = wizard.back()
    except WizardStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return NavigationResponseSchema(advanced=moved, state=_state(session_id, wizard))


@router.post("/sessions/{session_id}/confirm", response_model=ConfirmResponseSchema)
async def confirm_booking(session_id: str, wizard: WizardController = Depends(get_wizard)):
    try:
        outcome = await wizard.confirm()
    except WizardStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    logger.info(
        "Booking confirm finished",
        extra={"session_id": session_id, "status": wizard.status.value, "reason": outcome.kind},
    )
    return ConfirmResponseSchema(success=outcome.success, message=outcome.message, state=_state(session_id, wizard))


@router.delete("/sessions/{session_id}/error", response_model=WizardStateSchema)
async def dismiss_error(session_id: str, wizard: WizardController = Depends(get_wizard)):
    wizard.dismiss_error()
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/restart", response_model=WizardStateSchema)
async def restart(session_id: str, wizard: WizardController = Depends(get_wizard)):
    try:
        wizard.restart()
    except WizardStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _state(session_id, wizard)


@router.put("/sessions/{session_id}/locale", response_model=WizardStateSchema)
async def change_locale(session_id: str, req: LocaleSchema, wizard: WizardController = Depends(get_wizard)):
    wizard.set_locale(req.locale)
    return _state(session_id, wizard)


@router.get("/sessions/{session_id}/catalog", response_model=CatalogResponseSchema)
async def browse_catalog(
    session_id: str,
    category: str = Query(ALL_CATEGORIES),
    q: str = Query(""),
    wizard: WizardController = Depends(get_wizard),
):
    catalog = wizard.catalog
    selected = set(wizard.draft.selected_tests)
    return CatalogResponseSchema(
        categories=[
            CategorySchema(id=c.id, label=catalog.category_label(c.id, wizard.locale)) for c in catalog.categories
        ],
        tests=[
            CatalogTestSchema(
                id=test.id,
                code=test.code,
                category_id=test.category_id,
                label=catalog.display_name(test.id, wizard.locale),
                selected=test.id in selected,
                requires_fasting=test.requires_fasting,
                turnaround_time=test.turnaround_time_ar if wizard.locale == "ar" else test.turnaround_time,
            )
            for test in catalog.filter(category_id=category, query=q)
        ],
    )


@router.get("/sessions/{session_id}/schedule", response_model=ScheduleResponseSchema)
async def schedule_options(session_id: str, wizard: WizardController = Depends(get_wizard)):
    return ScheduleResponseSchema(
        dates=[
            DateOptionSchema(value=o.value, label=o.label, day=o.day) for o in upcoming_dates(date.today(), wizard.locale)
        ],
        time_slots=[TimeSlotSchema(value=s.value, label=s.label) for s in time_slots(wizard.locale)],
    )
