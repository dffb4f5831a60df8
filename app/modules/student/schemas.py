"""Student dashboard schemas."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, computed_field, field_validator

from app.core.enums import NoteAudienceEnum
from app.shared.utils import format_time, normalize_day

UNNAMED_COURSE_LABEL = "講座名未設定"


class AssignmentCourseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    subject: str
    instructor_name: str | None = None


class ClassroomAssignmentRead(BaseModel):
    """One room assignment with HH:MM times."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    course_id: UUID
    classroom: str
    day_of_week: str
    start_time: str
    end_time: str
    effective_date: date | None = None
    notes: str | None = None
    course: AssignmentCourseRead | None = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def trim_seconds(cls, value: object) -> object:
        return format_time(value)

    @field_validator("day_of_week", mode="before")
    @classmethod
    def normalize_day_code(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_day(value)
        return value

    @computed_field
    @property
    def course_name(self) -> str:
        return self.course.name if self.course and self.course.name else UNNAMED_COURSE_LABEL


class ClassroomDayRead(BaseModel):
    day: str
    label: str
    assignments: list[ClassroomAssignmentRead]


class ClassroomOverviewRead(BaseModel):
    term_name: str | None
    days: list[ClassroomDayRead]


class UsageNoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    content: str
    display_order: int


class InstructorNoteRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    course_id: UUID | None
    target_audience: NoteAudienceEnum
    title: str
    content: str
    created_at: datetime


class StudentNotesRead(BaseModel):
    usage_notes: list[UsageNoteRead]
    instructor_notes: list[InstructorNoteRead]
