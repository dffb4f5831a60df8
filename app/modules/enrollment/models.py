"""Enrollment ORM models."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base, BaseModelMixin, enum_values, utc_now
from app.core.enums import EnrollmentStatusEnum, PaymentMethodEnum, PaymentStatusEnum

if TYPE_CHECKING:
    from app.modules.catalog.models import Course
    from app.modules.identity.models import Profile


class Enrollment(BaseModelMixin, Base):
    """Student registration for a course or an individual tutoring slot.

    Individual tutoring rows have no course; their day/period/subjects/format
    are kept as JSON in ``notes``.
    """

    __tablename__ = "enrollments"

    student_id: Mapped[UUID] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("courses.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    term_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("terms.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: Mapped[EnrollmentStatusEnum] = mapped_column(
        SAEnum(EnrollmentStatusEnum, name="enrollment_status_enum", native_enum=False, values_callable=enum_values),
        default=EnrollmentStatusEnum.PENDING,
        nullable=False,
        index=True,
    )
    payment_method: Mapped[PaymentMethodEnum | None] = mapped_column(
        SAEnum(PaymentMethodEnum, name="payment_method_enum", native_enum=False, values_callable=enum_values),
        nullable=True,
    )
    payment_status: Mapped[PaymentStatusEnum] = mapped_column(
        SAEnum(PaymentStatusEnum, name="payment_status_enum", native_enum=False, values_callable=enum_values),
        default=PaymentStatusEnum.UNPAID,
        nullable=False,
    )
    payment_amount: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    payment_due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    enrolled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    course: Mapped["Course | None"] = relationship()
    student: Mapped["Profile"] = relationship()
