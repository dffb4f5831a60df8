"""Catalog schemas."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from pydantic import BaseModel, ConfigDict, computed_field, field_validator

from app.core.enums import CourseStatusEnum, CourseTypeEnum
from app.shared.utils import format_schedule, format_time, normalize_day


class TermRead(BaseModel):
    """Term response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    start_date: date
    end_date: date
    enrollment_start: date | None
    enrollment_end: date | None
    is_active: bool


class CategoryRead(BaseModel):
    """Course category response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    display_order: int
    description: str | None = None


class CourseRead(BaseModel):
    """Course response schema with a display-ready schedule."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID
    term_id: UUID | None
    name: str
    subject: str
    description: str = ""
    instructor_name: str | None = None
    course_type: CourseTypeEnum
    day_of_week: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    classroom: str | None = None
    capacity: int
    price: int
    target_grade: str | None = None
    status: CourseStatusEnum

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def trim_seconds(cls, value: object) -> object:
        if value is None:
            return None
        return format_time(value) or None

    @field_validator("day_of_week", mode="before")
    @classmethod
    def normalize_day_code(cls, value: object) -> object:
        if isinstance(value, str):
            return normalize_day(value) or None
        return value

    @computed_field
    @property
    def schedule_label(self) -> str:
        return format_schedule(self.day_of_week, self.start_time, self.end_time)

    @computed_field
    @property
    def is_selectable(self) -> bool:
        return self.status == CourseStatusEnum.OPEN


class SubjectCourses(BaseModel):
    subject: str
    courses: list[CourseRead]


class CategoryCourses(BaseModel):
    """Courses of one category, optionally split by subject."""

    category: CategoryRead
    courses: list[CourseRead]
    subjects: list[SubjectCourses] = []


class CourseCatalogRead(BaseModel):
    term: TermRead | None
    categories: list[CategoryCourses]


class TuitionInfoRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    category_id: UUID | None
    course_type: str
    label: str
    price: int
    unit: str
    notes: str | None


class PricePlanRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    label: str
    price: int
    unit: str
    description: str


class TuitionOverviewRead(BaseModel):
    """Tuition page payload: fixed plans plus the tuition table rows."""

    group_plan: PricePlanRead
    individual_plans: list[PricePlanRead]
    rows: list[TuitionInfoRead]
