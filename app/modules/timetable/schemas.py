"""Timetable schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from app.core.enums import CourseStatusEnum, CourseTypeEnum
from app.shared.utils import format_time, normalize_day


class SlotCourseRead(BaseModel):
    """Course fields shown inside a timetable cell."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    subject: str
    instructor_name: str | None = None
    target_grade: str | None = None
    course_type: CourseTypeEnum
    category_id: UUID
    price: int
    status: CourseStatusEnum


class SlotRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    course_id: UUID
    day_of_week: str
    period: int
    start_time: str
    end_time: str
    classroom: str
    course: SlotCourseRead | None = None

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
    def is_selectable(self) -> bool:
        return self.course is not None and self.course.status == CourseStatusEnum.OPEN


class PeriodCell(BaseModel):
    period: int
    label: str
    time_range: str
    slots: list[SlotRead] = []


class DayColumn(BaseModel):
    day: str
    periods: list[PeriodCell]


class CategoryTimetable(BaseModel):
    slug: str
    label: str
    days: list[DayColumn]


class GradeTimetableRead(BaseModel):
    """Timetable of one grade split by category."""

    grade: str
    term_name: str | None
    categories: list[CategoryTimetable]


class PeriodOption(BaseModel):
    period: str
    time_range: str


class DayPeriodsRead(BaseModel):
    day: str
    periods: list[PeriodOption]


class SelectionSummaryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_ids: list[str] = Field(default_factory=list, alias="courseIds")


class SelectionSummaryRead(BaseModel):
    courses: list[SlotCourseRead]
    total_price: int
