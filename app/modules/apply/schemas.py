"""Apply wizard schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.modules.catalog.schemas import CourseRead
from app.modules.enrollment.schemas import IndividualSlot
from app.modules.timetable.schemas import DayPeriodsRead


class IndividualDraftRequest(BaseModel):
    """Individual wizard state sent right before the sign-in redirect."""

    model_config = ConfigDict(populate_by_name=True)

    slots: list[IndividualSlot] = Field(default_factory=list)
    subjects: list[str] = Field(default_factory=list)
    format: str | None = None
    friend_names: list[str] = Field(default_factory=list, alias="friendNames")
    payment_method: str | None = Field(default=None, alias="paymentMethod")


class DraftCreatedRead(BaseModel):
    draft_id: str = Field(serialization_alias="draftId")
    login_url: str = Field(serialization_alias="loginUrl")


class IndividualDraftRead(BaseModel):
    """Restored wizard, positioned on the confirm step."""

    step: str
    slots: list[IndividualSlot]
    slots_query: str = Field(serialization_alias="slotsQuery")
    subjects: list[str]
    format: str
    friend_names: list[str] = Field(serialization_alias="friendNames")
    payment_method: str = Field(serialization_alias="paymentMethod")


class GroupPreviewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_ids: list[str] = Field(default_factory=list, alias="courseIds")
    payment_method: str | None = Field(default=None, alias="paymentMethod")


class GroupPreviewRead(BaseModel):
    """Selection after dropping unknown or closed courses."""

    courses: list[CourseRead]
    removed_course_ids: list[str]
    total_price: int
    payment_method: str
    next_path: str


class LabeledOption(BaseModel):
    value: str
    label: str


class FormatOption(LabeledOption):
    companions: int
    price: int


class IndividualOptionsRead(BaseModel):
    subjects: list[str]
    formats: list[FormatOption]
    payment_methods: list[LabeledOption]
    periods: list[DayPeriodsRead]
