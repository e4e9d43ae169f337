from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from request_composer.api.v1.schemas import (
    AddSelectionRequestSchema,
    AddSelectionResponseSchema,
    AdditionalInfoRequestSchema,
    ImportRequestSchema,
    ProfileUpdateSchema,
    QuantityRequestSchema,
    SubmissionResponseSchema,
    SubmitRequestSchema,
    SyncResponseSchema,
    WarningResponseSchema,
)
from request_composer.application.exceptions import CatalogUnavailableError
from request_composer.application.use_cases.composition_session import CompositionSession
from request_composer.application.use_cases.sync_pending_requests import SyncPendingRequestsUseCase
from request_composer.application.utils.state_codec import serialize_state
from request_composer.wiring.dependencies import get_composition_session, get_sync_use_case

router = APIRouter()


def _require_selection(session: CompositionSession, service_id: str) -> None:
    if not any(entry.id == service_id for entry in session.state.selections):
        raise HTTPException(status_code=404, detail=f"Selection {service_id} not found")


@router.get("")
def get_state(session: CompositionSession = Depends(get_composition_session)) -> dict[str, Any]:
    return serialize_state(session.state)


@router.put("/profile")
def update_profile(
    req: ProfileUpdateSchema,
    session: CompositionSession = Depends(get_composition_session),
) -> dict[str, Any]:
    state = session.set_form_data(req.model_dump(exclude_none=True))
    return serialize_state(state)


@router.post("/selections", response_model=AddSelectionResponseSchema)
def add_selection(
    req: AddSelectionRequestSchema,
    session: CompositionSession = Depends(get_composition_session),
):
    try:
        service_id = session.add_service_by_code(req.code, req.quantity, category=req.category)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CatalogUnavailableError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if service_id is None:
        raise HTTPException(status_code=400, detail="Quantity must be at least 1")
    return AddSelectionResponseSchema(service_id=service_id)


@router.put("/selections/{service_id}/quantity")
def set_quantity(
    service_id: str,
    req: QuantityRequestSchema,
    session: CompositionSession = Depends(get_composition_session),
) -> dict[str, Any]:
    _require_selection(session, service_id)
    return serialize_state(session.set_quantity(service_id, req.quantity))


@router.put("/selections/{service_id}/instances/{instance_id}")
def update_instance(
    service_id: str,
    instance_id: str,
    req: AdditionalInfoRequestSchema,
    session: CompositionSession = Depends(get_composition_session),
) -> dict[str, Any]:
    _require_selection(session, service_id)
    return serialize_state(session.update_additional_info(service_id, instance_id, req.additional_info))


@router.delete("/selections/{service_id}/instances/{instance_id}")
def remove_instance(
    service_id: str,
    instance_id: str,
    session: CompositionSession = Depends(get_composition_session),
) -> dict[str, Any]:
    _require_selection(session, service_id)
    return serialize_state(session.remove_instance(service_id, instance_id))


@router.delete("/selections/{service_id}")
def remove_selection(
    service_id: str,
    session: CompositionSession = Depends(get_composition_session),
) -> dict[str, Any]:
    return serialize_state(session.remove_selected_service(service_id))


@router.post("/import")
def import_selections(
    req: ImportRequestSchema,
    session: CompositionSession = Depends(get_composition_session),
) -> dict[str, Any]:
    state = session.import_from_source(
        req.source_id,
        [entry.to_entity() for entry in req.selections],
        mode=req.mode.value,
    )
    return serialize_state(state)


@router.post("/submit", response_model=SubmissionResponseSchema)
def submit(
    req: SubmitRequestSchema,
    session: CompositionSession = Depends(get_composition_session),
):
    result = session.submit(request_id=req.request_id)
    return SubmissionResponseSchema(
        success=result.success,
        outcome=result.outcome.value,
        message=result.message,
        request_id=result.request_id,
        remote_persisted=result.remote_persisted,
        warning=result.warning,
    )


@router.post("/reset")
def reset(session: CompositionSession = Depends(get_composition_session)) -> dict[str, Any]:
    return serialize_state(session.reset())


@router.get("/warning", response_model=WarningResponseSchema)
def current_warning(session: CompositionSession = Depends(get_composition_session)):
    return WarningResponseSchema(warning=session.current_warning())


@router.post("/sync", response_model=SyncResponseSchema)
def sync_pending(uc: SyncPendingRequestsUseCase = Depends(get_sync_use_case)):
    report = uc.execute()
    return SyncResponseSchema(
        replayed=report.replayed,
        failed=report.failed,
        skipped_offline=report.skipped_offline,
        unremoved=report.unremoved,
    )
