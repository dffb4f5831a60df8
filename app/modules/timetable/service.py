"""Timetable business logic layer."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import (
    ALL_DAYS,
    CATEGORY_LABELS,
    GRADE_CATEGORY_SLUGS,
    periods_for_day,
)
from app.core.database import get_db_session
from app.modules.catalog.models import CourseCategory
from app.modules.catalog.repository import CatalogRepository
from app.modules.timetable.models import TimetableSlot
from app.modules.timetable.repository import TimetableRepository
from app.modules.timetable.schemas import (
    CategoryTimetable,
    DayColumn,
    DayPeriodsRead,
    GradeTimetableRead,
    PeriodCell,
    PeriodOption,
    SelectionSummaryRead,
    SlotCourseRead,
    SlotRead,
)
from app.shared.exceptions import ValidationFailedException


def build_day_grid(slots: Sequence[SlotRead]) -> list[DayColumn]:
    """Place slots into the day -> period grid; every cell is present."""
    columns: list[DayColumn] = []
    for day in ALL_DAYS:
        cells = [
            PeriodCell(
                period=period.number,
                label=period.label,
                time_range=period.time_range,
                slots=[slot for slot in slots if slot.day_of_week == day and slot.period == period.number],
            )
            for period in periods_for_day(day)
        ]
        columns.append(DayColumn(day=day, periods=cells))
    return columns


def build_grade_timetable(
    slots: Iterable[TimetableSlot],
    categories: Iterable[CourseCategory],
    grade: str,
    term_name: str | None = None,
) -> GradeTimetableRead:
    """Timetable of one grade: one grid per category the grade shows."""
    category_slugs = GRADE_CATEGORY_SLUGS.get(grade)
    if category_slugs is None:
        raise ValidationFailedException([f"無効な学年です: {grade}"])

    slug_by_category_id: dict[UUID, str] = {category.id: category.slug for category in categories}
    serialized = [SlotRead.model_validate(slot) for slot in slots if slot.course is not None]

    grids: list[CategoryTimetable] = []
    for slug in category_slugs:
        matching = [
            slot
            for slot in serialized
            if slot.course is not None
            and slot.course.target_grade == grade
            and slug_by_category_id.get(slot.course.category_id) == slug
        ]
        grids.append(
            CategoryTimetable(
                slug=slug,
                label=CATEGORY_LABELS.get(slug, slug),
                days=build_day_grid(matching),
            ),
        )
    return GradeTimetableRead(grade=grade, term_name=term_name, categories=grids)


def individual_period_grid() -> list[DayPeriodsRead]:
    """Day/period choices for individual tutoring."""
    return [
        DayPeriodsRead(
            day=day,
            periods=[
                PeriodOption(period=period.label, time_range=period.time_range) for period in periods_for_day(day)
            ],
        )
        for day in ALL_DAYS
    ]


def summarize_selection(slots: Iterable[TimetableSlot], course_ids: Iterable[str]) -> SelectionSummaryRead:
    """Unique selected courses and their total price.

    A course placed in several slots is counted once.
    """
    wanted = {str(course_id) for course_id in course_ids}
    unique: dict[str, SlotCourseRead] = {}
    for slot in slots:
        key = str(slot.course_id)
        if key in wanted and key not in unique and slot.course is not None:
            unique[key] = SlotCourseRead.model_validate(slot.course)
    courses = list(unique.values())
    return SelectionSummaryRead(courses=courses, total_price=sum(course.price for course in courses))


class TimetableService:
    """Timetable browser backed by the active term."""

    def __init__(
        self,
        timetable_repository: TimetableRepository,
        catalog_repository: CatalogRepository,
    ) -> None:
        self.timetable_repository = timetable_repository
        self.catalog_repository = catalog_repository

    async def _active_term_slots(self) -> tuple[Sequence[TimetableSlot], str | None]:
        term = await self.catalog_repository.get_active_term()
        slots = await self.timetable_repository.list_slots(term.id if term else None)
        return slots, term.name if term else None

    async def get_grade_timetable(self, grade: str) -> GradeTimetableRead:
        slots, term_name = await self._active_term_slots()
        categories = await self.catalog_repository.list_categories()
        return build_grade_timetable(slots, categories, grade, term_name)

    async def summarize_selection(self, course_ids: Sequence[str]) -> SelectionSummaryRead:
        slots, _ = await self._active_term_slots()
        return summarize_selection(slots, course_ids)


async def get_timetable_service(session: AsyncSession = Depends(get_db_session)) -> TimetableService:
    """Dependency provider for timetable service."""
    return TimetableService(
        timetable_repository=TimetableRepository(session),
        catalog_repository=CatalogRepository(session),
    )
