"""Enrollment schemas."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field

from app.core.constants import ENROLLMENT_STATUS_LABELS, PAYMENT_METHOD_LABELS, PAYMENT_STATUS_LABELS
from app.core.enums import EnrollmentStatusEnum, PaymentMethodEnum, PaymentStatusEnum
from app.modules.catalog.schemas import CourseRead

INDIVIDUAL_ENROLLMENT_TYPE = "individual"


class IndividualSlot(BaseModel):
    """Day/period pair picked in the individual tutoring grid."""

    day: str
    period: str

    @property
    def key(self) -> str:
        return f"{self.day}-{self.period}"


class EnrollmentRequest(BaseModel):
    """Body of POST /enroll; group when `type` is not "individual".

    Fields stay loosely typed so rule violations surface as the portal's
    own messages instead of schema errors.
    """

    model_config = ConfigDict(populate_by_name=True)

    type: str | None = None
    course_ids: list[str] | None = Field(default=None, alias="courseIds")
    payment_method: str | None = Field(default=None, alias="paymentMethod")
    slots: list[IndividualSlot] | None = None
    subjects: list[str] | None = None
    subject: str | None = None
    course_count: int | None = Field(default=None, alias="courseCount")
    format: str | None = None
    friend_names: list[str] | None = Field(default=None, alias="friendNames")

    @property
    def is_individual(self) -> bool:
        return self.type == INDIVIDUAL_ENROLLMENT_TYPE

    def subject_list(self) -> list[str]:
        """`subjects`, falling back to the legacy single `subject` field."""
        if self.subjects is not None:
            return [item for item in self.subjects if item]
        return [self.subject] if self.subject else []


class EnrollmentResult(BaseModel):
    success: bool = True
    message: str
    enrollment_count: int = Field(serialization_alias="enrollmentCount")


class IndividualEnrollmentNotes(BaseModel):
    """JSON document stored in `enrollments.notes` for individual tutoring."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = INDIVIDUAL_ENROLLMENT_TYPE
    day: str
    period: str
    subjects: list[str]
    course_count: int = Field(alias="courseCount")
    format: str
    friend_names: list[str] = Field(default_factory=list, alias="friendNames")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def parse(cls, raw: str | None) -> "IndividualEnrollmentNotes | None":
        """Parse stored notes; rows with other or broken notes yield None."""
        if not raw:
            return None
        try:
            notes = cls.model_validate_json(raw)
        except ValidationError:
            return None
        if notes.type != INDIVIDUAL_ENROLLMENT_TYPE:
            return None
        return notes


class EnrollmentRead(BaseModel):
    """Enrollment as shown on the student dashboard."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    course_id: UUID | None
    term_id: UUID | None
    status: EnrollmentStatusEnum
    payment_method: PaymentMethodEnum | None
    payment_status: PaymentStatusEnum
    payment_amount: int
    payment_due_date: date | None
    enrolled_at: datetime
    confirmed_at: datetime | None
    course: CourseRead | None = None
    individual: IndividualEnrollmentNotes | None = None

    @computed_field
    @property
    def status_label(self) -> str:
        return ENROLLMENT_STATUS_LABELS[self.status]

    @computed_field
    @property
    def payment_status_label(self) -> str:
        return PAYMENT_STATUS_LABELS[self.payment_status]

    @computed_field
    @property
    def payment_method_label(self) -> str | None:
        if self.payment_method is None:
            return None
        return PAYMENT_METHOD_LABELS[self.payment_method]


class PaymentsOverviewRead(BaseModel):
    """Active term enrollments with payment totals."""

    term_name: str | None
    enrollments: list[EnrollmentRead]
    total_amount: int
    paid_amount: int
    outstanding_amount: int
