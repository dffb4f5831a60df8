"""Timetable API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.core.constants import JUNIOR_GRADES, SENIOR_GRADES
from app.modules.timetable.schemas import (
    DayPeriodsRead,
    GradeTimetableRead,
    SelectionSummaryRead,
    SelectionSummaryRequest,
)
from app.modules.timetable.service import TimetableService, get_timetable_service, individual_period_grid

router = APIRouter(prefix="/timetable", tags=["timetable"])


@router.get("", response_model=GradeTimetableRead)
async def get_grade_timetable(
    grade: str = Query(default=SENIOR_GRADES[0]),
    service: TimetableService = Depends(get_timetable_service),
) -> GradeTimetableRead:
    """Timetable grid of the active term for one grade."""
    return await service.get_grade_timetable(grade)


@router.get("/grades", response_model=dict[str, list[str]])
async def list_grades() -> dict[str, list[str]]:
    return {"senior": list(SENIOR_GRADES), "junior": list(JUNIOR_GRADES)}


@router.get("/individual-periods", response_model=list[DayPeriodsRead])
async def get_individual_periods() -> list[DayPeriodsRead]:
    """Day/period grid offered for individual tutoring."""
    return individual_period_grid()


@router.post("/selection-summary", response_model=SelectionSummaryRead)
async def summarize_selection(
    payload: SelectionSummaryRequest,
    service: TimetableService = Depends(get_timetable_service),
) -> SelectionSummaryRead:
    """Unique selected courses and their total price."""
    return await service.summarize_selection(payload.course_ids)
