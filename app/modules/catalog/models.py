"""Catalog ORM models: terms, categories, courses and tuition rows."""

from __future__ import annotations

from datetime import date, time
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String, Text, Time
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BaseModelMixin, CreatedAtMixin, UUIDMixin, enum_values
from app.core.enums import CourseStatusEnum, CourseTypeEnum


class Term(BaseModelMixin, Base):
    """Enrollment period. Exactly one term is expected to be active."""

    __tablename__ = "terms"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    slug: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    enrollment_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    enrollment_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class CourseCategory(UUIDMixin, CreatedAtMixin, Base):
    """Course grouping shown as a tab (general, recommendation, ...)."""

    __tablename__ = "course_categories"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    slug: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    courses: Mapped[list["Course"]] = relationship(back_populates="category")


class Course(BaseModelMixin, Base):
    """Purchasable offering with schedule and price."""

    __tablename__ = "courses"

    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("course_categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    term_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("terms.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    instructor_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    course_type: Mapped[CourseTypeEnum] = mapped_column(
        SAEnum(CourseTypeEnum, name="course_type_enum", native_enum=False, values_callable=enum_values),
        default=CourseTypeEnum.GROUP,
        nullable=False,
    )
    day_of_week: Mapped[str | None] = mapped_column(String(8), nullable=True)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    classroom: Mapped[str | None] = mapped_column(String(64), nullable=True)
    capacity: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    price: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    target_grade: Mapped[str | None] = mapped_column(String(16), nullable=True)
    status: Mapped[CourseStatusEnum] = mapped_column(
        SAEnum(CourseStatusEnum, name="course_status_enum", native_enum=False, values_callable=enum_values),
        default=CourseStatusEnum.DRAFT,
        nullable=False,
        index=True,
    )
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    category: Mapped[CourseCategory] = relationship(back_populates="courses")
    term: Mapped[Term | None] = relationship()


class TuitionInfo(BaseModelMixin, Base):
    """Tuition line shown on the tuition page."""

    __tablename__ = "tuition_info"

    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("course_categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    course_type: Mapped[str] = mapped_column(String(32), nullable=False)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    unit: Mapped[str] = mapped_column(String(32), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
