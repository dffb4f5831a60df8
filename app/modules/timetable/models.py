"""Timetable ORM models."""

from __future__ import annotations

from datetime import time
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, CreatedAtMixin, UUIDMixin

if TYPE_CHECKING:
    from app.modules.catalog.models import Course


class TimetableSlot(UUIDMixin, CreatedAtMixin, Base):
    """Weekly placement of a course at a day/period/classroom."""

    __tablename__ = "timetable_slots"

    course_id: Mapped[UUID] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    day_of_week: Mapped[str] = mapped_column(String(8), nullable=False)
    period: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    classroom: Mapped[str] = mapped_column(String(64), default="", nullable=False)

    course: Mapped["Course"] = relationship()
