"""Student dashboard ORM models."""

from __future__ import annotations

from datetime import date, time
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, Text, Time
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BaseModelMixin, enum_values
from app.core.enums import NoteAudienceEnum

if TYPE_CHECKING:
    from app.modules.catalog.models import Course


class ClassroomAssignment(BaseModelMixin, Base):
    """Room a course meets in on a given weekday."""

    __tablename__ = "classroom_assignments"

    course_id: Mapped[UUID] = mapped_column(
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    classroom: Mapped[str] = mapped_column(String(64), nullable=False)
    day_of_week: Mapped[str] = mapped_column(String(8), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    effective_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    course: Mapped["Course"] = relationship()


class InstructorNote(BaseModelMixin, Base):
    __tablename__ = "instructor_notes"

    instructor_id: Mapped[UUID] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("courses.id", ondelete="SET NULL"),
        nullable=True,
    )
    target_audience: Mapped[NoteAudienceEnum] = mapped_column(
        SAEnum(NoteAudienceEnum, name="note_audience_enum", native_enum=False, values_callable=enum_values),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)


class StudentUsageNote(BaseModelMixin, Base):
    """House rules shown to students, ordered by display_order."""

    __tablename__ = "student_usage_notes"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
