"""Student dashboard API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.modules.identity.service import get_current_student
from app.modules.student.schemas import ClassroomOverviewRead, StudentNotesRead
from app.modules.student.service import StudentService, get_student_service

router = APIRouter(prefix="/student", tags=["student"], dependencies=[Depends(get_current_student)])


@router.get("/classroom", response_model=ClassroomOverviewRead)
async def get_classroom(
    service: StudentService = Depends(get_student_service),
) -> ClassroomOverviewRead:
    """Active term classroom assignments grouped by weekday."""
    return await service.get_classroom_overview()


@router.get("/notes", response_model=StudentNotesRead)
async def get_notes(
    service: StudentService = Depends(get_student_service),
) -> StudentNotesRead:
    return await service.get_notes()
