"""Student dashboard repository layer."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.enums import NoteAudienceEnum
from app.modules.catalog.models import Course
from app.modules.student.models import ClassroomAssignment, InstructorNote, StudentUsageNote

STUDENT_AUDIENCES = (NoteAudienceEnum.STUDENT, NoteAudienceEnum.BOTH)


class StudentRepository:
    """Read queries backing the student dashboard."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_classroom_assignments(self, term_id: UUID | None) -> Sequence[ClassroomAssignment]:
        """Assignments whose course belongs to the term; all when term is None."""
        stmt = select(ClassroomAssignment).options(selectinload(ClassroomAssignment.course))
        if term_id is not None:
            stmt = stmt.join(Course, ClassroomAssignment.course_id == Course.id).where(Course.term_id == term_id)
        stmt = stmt.order_by(ClassroomAssignment.start_time.asc())
        return (await self.session.scalars(stmt)).all()

    async def list_usage_notes(self) -> Sequence[StudentUsageNote]:
        stmt = (
            select(StudentUsageNote)
            .where(StudentUsageNote.is_active.is_(True))
            .order_by(StudentUsageNote.display_order.asc())
        )
        return (await self.session.scalars(stmt)).all()

    async def list_instructor_notes_for_students(self) -> Sequence[InstructorNote]:
        stmt = (
            select(InstructorNote)
            .where(InstructorNote.target_audience.in_(STUDENT_AUDIENCES))
            .order_by(InstructorNote.created_at.desc())
        )
        return (await self.session.scalars(stmt)).all()
