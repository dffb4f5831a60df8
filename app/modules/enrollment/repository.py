"""Enrollment repository layer."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.enums import EnrollmentStatusEnum
from app.modules.enrollment.models import Enrollment


class EnrollmentRepository:
    """DB operations for enrollments."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_active_course_ids(self, student_id: UUID, course_ids: Sequence[UUID]) -> list[UUID]:
        """Courses among `course_ids` the student holds a non-cancelled enrollment for."""
        if not course_ids:
            return []
        stmt = select(Enrollment.course_id).where(
            Enrollment.student_id == student_id,
            Enrollment.course_id.in_(course_ids),
            Enrollment.status != EnrollmentStatusEnum.CANCELLED,
        )
        return [course_id for course_id in (await self.session.scalars(stmt)).all() if course_id is not None]

    async def create_enrollments(self, enrollments: Sequence[Enrollment]) -> list[Enrollment]:
        """Insert all rows in one flush; nothing is written if any row fails."""
        self.session.add_all(enrollments)
        await self.session.flush()
        return list(enrollments)

    async def list_student_enrollments(self, student_id: UUID) -> Sequence[Enrollment]:
        stmt = (
            select(Enrollment)
            .options(selectinload(Enrollment.course))
            .where(Enrollment.student_id == student_id)
            .order_by(Enrollment.enrolled_at.desc())
        )
        return (await self.session.scalars(stmt)).all()
