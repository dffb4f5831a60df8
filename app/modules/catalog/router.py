"""Catalog API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.modules.catalog.schemas import CategoryRead, CourseCatalogRead, TermRead, TuitionOverviewRead
from app.modules.catalog.service import CatalogService, get_catalog_service

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/terms/active", response_model=TermRead)
async def get_active_term(service: CatalogService = Depends(get_catalog_service)) -> TermRead:
    """Return the term currently open for enrollment."""
    term = await service.require_active_term()
    return TermRead.model_validate(term)


@router.get("/categories", response_model=list[CategoryRead])
async def list_categories(service: CatalogService = Depends(get_catalog_service)) -> list[CategoryRead]:
    categories = await service.list_categories()
    return [CategoryRead.model_validate(item) for item in categories]


@router.get("/courses", response_model=CourseCatalogRead)
async def get_course_catalog(service: CatalogService = Depends(get_catalog_service)) -> CourseCatalogRead:
    """Course list grouped by category and subject."""
    return await service.get_course_catalog()


@router.get("/apply-courses", response_model=CourseCatalogRead)
async def get_apply_courses(service: CatalogService = Depends(get_catalog_service)) -> CourseCatalogRead:
    """Open courses selectable in the group apply wizard."""
    return await service.get_apply_courses()


@router.get("/tuition", response_model=TuitionOverviewRead)
async def get_tuition(service: CatalogService = Depends(get_catalog_service)) -> TuitionOverviewRead:
    return await service.get_tuition_overview()
