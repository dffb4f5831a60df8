"""Student dashboard business logic layer."""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import ALL_DAYS
from app.core.database import get_db_session
from app.modules.catalog.repository import CatalogRepository
from app.modules.student.models import ClassroomAssignment
from app.modules.student.repository import StudentRepository
from app.modules.student.schemas import (
    ClassroomAssignmentRead,
    ClassroomDayRead,
    ClassroomOverviewRead,
    InstructorNoteRead,
    StudentNotesRead,
    UsageNoteRead,
)


def group_assignments_by_day(assignments: Sequence[ClassroomAssignment]) -> list[ClassroomDayRead]:
    """Bucket assignments into 月..土, earliest start first; empty days are left out."""
    items = [ClassroomAssignmentRead.model_validate(assignment) for assignment in assignments]
    days: list[ClassroomDayRead] = []
    for day in ALL_DAYS:
        day_items = sorted(
            (item for item in items if item.day_of_week == day),
            key=lambda item: item.start_time,
        )
        if day_items:
            days.append(ClassroomDayRead(day=day, label=f"{day}曜日", assignments=day_items))
    return days


class StudentService:
    """Classroom and notes views for signed-in students."""

    def __init__(self, student_repository: StudentRepository, catalog_repository: CatalogRepository) -> None:
        self.student_repository = student_repository
        self.catalog_repository = catalog_repository

    async def get_classroom_overview(self) -> ClassroomOverviewRead:
        term = await self.catalog_repository.get_active_term()
        assignments = await self.student_repository.list_classroom_assignments(term.id if term else None)
        return ClassroomOverviewRead(
            term_name=term.name if term else None,
            days=group_assignments_by_day(assignments),
        )

    async def get_notes(self) -> StudentNotesRead:
        usage_notes = await self.student_repository.list_usage_notes()
        instructor_notes = await self.student_repository.list_instructor_notes_for_students()
        return StudentNotesRead(
            usage_notes=[UsageNoteRead.model_validate(note) for note in usage_notes],
            instructor_notes=[InstructorNoteRead.model_validate(note) for note in instructor_notes],
        )


async def get_student_service(session: AsyncSession = Depends(get_db_session)) -> StudentService:
    """Dependency provider for student service."""
    return StudentService(
        student_repository=StudentRepository(session),
        catalog_repository=CatalogRepository(session),
    )
