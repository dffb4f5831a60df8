"""Apply wizard API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.modules.apply.rate_limit import enforce_draft_rate_limit
from app.modules.apply.schemas import (
    DraftCreatedRead,
    GroupPreviewRead,
    GroupPreviewRequest,
    IndividualDraftRead,
    IndividualDraftRequest,
    IndividualOptionsRead,
)
from app.modules.apply.service import ApplyService, get_apply_service, individual_options
from app.modules.identity.service import get_optional_user

router = APIRouter(prefix="/apply", tags=["apply"])


@router.post("/group/preview", response_model=GroupPreviewRead)
async def preview_group_selection(
    payload: GroupPreviewRequest,
    current_user=Depends(get_optional_user),
    service: ApplyService = Depends(get_apply_service),
) -> GroupPreviewRead:
    """Drop unavailable courses and report where the wizard goes next."""
    return await service.preview_group(payload, authenticated=current_user is not None)


@router.get("/individual/options", response_model=IndividualOptionsRead)
async def get_individual_options() -> IndividualOptionsRead:
    return individual_options()


@router.post(
    "/individual/drafts",
    response_model=DraftCreatedRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_draft_rate_limit)],
)
async def create_individual_draft(
    payload: IndividualDraftRequest,
    service: ApplyService = Depends(get_apply_service),
) -> DraftCreatedRead:
    """Park the individual wizard state before sending the user to sign in."""
    return await service.create_individual_draft(payload)


@router.get("/individual/drafts/{draft_id}", response_model=IndividualDraftRead)
async def restore_individual_draft(
    draft_id: str,
    service: ApplyService = Depends(get_apply_service),
) -> IndividualDraftRead:
    """Return a parked draft once; it is gone after this call."""
    return await service.restore_individual_draft(draft_id)
