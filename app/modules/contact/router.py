"""Contact API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from app.core.constants import CONTACT_CATEGORY_LABELS
from app.modules.contact.rate_limit import enforce_contact_rate_limit
from app.modules.contact.schemas import ContactCategoryRead, ContactRequest, ContactResult
from app.modules.contact.service import ContactService, get_contact_service

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post(
    "",
    response_model=ContactResult,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_contact_rate_limit)],
)
async def submit_contact(
    payload: ContactRequest,
    service: ContactService = Depends(get_contact_service),
) -> ContactResult:
    """Store a contact form inquiry."""
    return await service.submit(payload)


@router.get("/categories", response_model=list[ContactCategoryRead])
async def list_contact_categories() -> list[ContactCategoryRead]:
    return [
        ContactCategoryRead(value=category.value, label=label)
        for category, label in CONTACT_CATEGORY_LABELS.items()
    ]
