"""Timetable repository layer."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.modules.catalog.models import Course
from app.modules.timetable.models import TimetableSlot


class TimetableRepository:
    """DB access for timetable slots."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_slots(self, term_id: UUID | None) -> Sequence[TimetableSlot]:
        """Slots with their course, restricted to the term when given."""
        stmt = (
            select(TimetableSlot)
            .join(TimetableSlot.course)
            .options(selectinload(TimetableSlot.course).selectinload(Course.category))
        )
        if term_id is not None:
            stmt = stmt.where(Course.term_id == term_id)
        stmt = stmt.order_by(TimetableSlot.day_of_week.asc(), TimetableSlot.period.asc())
        return (await self.session.scalars(stmt)).all()
