"""Catalog business logic layer."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import GROUP_PRICE_PLAN, INDIVIDUAL_PRICE_PLANS, SUBJECTS
from app.core.database import get_db_session
from app.core.enums import CourseStatusEnum
from app.modules.catalog.models import Course, CourseCategory, Term
from app.modules.catalog.repository import CatalogRepository
from app.modules.catalog.schemas import (
    CategoryCourses,
    CategoryRead,
    CourseCatalogRead,
    CourseRead,
    PricePlanRead,
    SubjectCourses,
    TermRead,
    TuitionInfoRead,
    TuitionOverviewRead,
)
from app.shared.exceptions import NotFoundException


def group_courses_by_subject(courses: Iterable[CourseRead]) -> list[SubjectCourses]:
    """Split courses into the fixed subject order, skipping empty subjects.

    Subjects outside the fixed list are appended after it in first-seen order.
    """
    buckets: dict[str, list[CourseRead]] = {subject: [] for subject in SUBJECTS}
    for course in courses:
        buckets.setdefault(course.subject, []).append(course)
    return [
        SubjectCourses(subject=subject, courses=items)
        for subject, items in buckets.items()
        if items
    ]


def group_courses_by_category(
    categories: Sequence[CourseCategory],
    courses: Sequence[Course],
    *,
    split_subjects: bool,
) -> list[CategoryCourses]:
    """Attach courses to every category; categories keep their display order."""
    by_category: dict[object, list[CourseRead]] = {category.id: [] for category in categories}
    for course in courses:
        if course.category_id in by_category:
            by_category[course.category_id].append(CourseRead.model_validate(course))

    grouped: list[CategoryCourses] = []
    for category in categories:
        items = by_category[category.id]
        grouped.append(
            CategoryCourses(
                category=CategoryRead.model_validate(category),
                courses=items,
                subjects=group_courses_by_subject(items) if split_subjects else [],
            ),
        )
    return grouped


class CatalogService:
    """Catalog read models for the public pages and the apply wizard."""

    def __init__(self, repository: CatalogRepository) -> None:
        self.repository = repository

    async def get_active_term(self) -> Term | None:
        return await self.repository.get_active_term()

    async def require_active_term(self) -> Term:
        term = await self.repository.get_active_term()
        if term is None:
            raise NotFoundException("現在受付中の会期はありません。")
        return term

    async def list_categories(self) -> Sequence[CourseCategory]:
        return await self.repository.list_categories()

    async def get_course_catalog(self) -> CourseCatalogRead:
        """All courses of the active term, by category then subject."""
        term = await self.repository.get_active_term()
        categories = await self.repository.list_categories()
        courses = await self.repository.list_courses(term.id if term else None)
        return CourseCatalogRead(
            term=TermRead.model_validate(term) if term else None,
            categories=group_courses_by_category(categories, courses, split_subjects=True),
        )

    async def get_apply_courses(self) -> CourseCatalogRead:
        """Open courses of the active term for the first apply step."""
        term = await self.repository.get_active_term()
        categories = await self.repository.list_categories()
        courses = await self.repository.list_courses(
            term.id if term else None,
            status=CourseStatusEnum.OPEN,
        )
        return CourseCatalogRead(
            term=TermRead.model_validate(term) if term else None,
            categories=group_courses_by_category(categories, courses, split_subjects=False),
        )

    async def get_tuition_overview(self) -> TuitionOverviewRead:
        rows = await self.repository.list_tuition_info()
        return TuitionOverviewRead(
            group_plan=PricePlanRead.model_validate(GROUP_PRICE_PLAN),
            individual_plans=[PricePlanRead.model_validate(plan) for plan in INDIVIDUAL_PRICE_PLANS],
            rows=[TuitionInfoRead.model_validate(row) for row in rows],
        )


async def get_catalog_service(session: AsyncSession = Depends(get_db_session)) -> CatalogService:
    """Dependency provider for catalog service."""
    return CatalogService(CatalogRepository(session))
