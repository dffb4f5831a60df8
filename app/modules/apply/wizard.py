"""Step state machines behind the group and individual application wizards.

Both wizards are plain objects: routers rebuild them from a query string
or a stored draft, move them forward, and read back the path the browser
should land on next.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol
from urllib.parse import quote, urlencode

from app.core.constants import FORMAT_COMPANIONS
from app.core.enums import CourseStatusEnum, CourseTypeEnum, PaymentMethodEnum
from app.modules.enrollment.schemas import INDIVIDUAL_ENROLLMENT_TYPE, EnrollmentRequest, IndividualSlot
from app.modules.enrollment.service import (
    MSG_COMPANION_REQUIRED,
    MSG_SELECT_COURSE,
    MSG_SELECT_SLOT,
    MSG_SELECT_SUBJECT,
)
from app.shared.exceptions import ValidationFailedException

DEFAULT_PAYMENT_METHOD = PaymentMethodEnum.BANK_TRANSFER
DEFAULT_INDIVIDUAL_FORMAT = CourseTypeEnum.INDIVIDUAL_1ON1
MAX_COMPANIONS = 2

INDIVIDUAL_APPLY_PATH = "/apply/individual"
INDIVIDUAL_RESTORE_PATH = f"{INDIVIDUAL_APPLY_PATH}?restore=true"
STUDENT_LOGIN_PAGE = "/auth/student-login"

MSG_ALREADY_COMPLETE = "申し込みは既に完了しています。"


class GroupStep(StrEnum):
    SELECT = "select"
    LOGIN = "login"
    PAYMENT = "payment"
    CONFIRM = "confirm"
    COMPLETE = "complete"


class IndividualStep(StrEnum):
    TIMESLOT = "timeslot"
    SUBJECT = "subject"
    FORMAT = "format"
    PAYMENT = "payment"
    CONFIRM = "confirm"
    COMPLETE = "complete"


GROUP_STEPS: tuple[GroupStep, ...] = tuple(GroupStep)
INDIVIDUAL_STEPS: tuple[IndividualStep, ...] = tuple(IndividualStep)

GROUP_STEP_PATHS: dict[GroupStep, str] = {
    GroupStep.SELECT: "/apply",
    GroupStep.LOGIN: "/apply/login",
    GroupStep.PAYMENT: "/apply/payment",
    GroupStep.CONFIRM: "/apply/confirm",
    GroupStep.COMPLETE: "/apply/complete",
}


class SelectableCourse(Protocol):
    id: object
    status: CourseStatusEnum


@dataclass(slots=True)
class WizardTransition:
    """Result of trying to move forward.

    ``login_redirect`` is set when the move needs a signed-in user; the
    wizard then stays on its current step.
    """

    step: str
    path: str
    login_redirect: str | None = None

    @property
    def requires_login(self) -> bool:
        return self.login_redirect is not None


def payment_method_or_default(value: str | None) -> PaymentMethodEnum:
    """Unknown or missing values fall back to bank transfer."""
    try:
        return PaymentMethodEnum(value)
    except ValueError:
        return DEFAULT_PAYMENT_METHOD


def split_csv(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def format_slots(slots: Iterable[IndividualSlot]) -> str:
    """Serialize slots as ``月-1限,火-2限``."""
    return ",".join(slot.key for slot in slots)


def parse_slots(raw: str | None) -> list[IndividualSlot]:
    """Inverse of :func:`format_slots`; malformed items are skipped."""
    slots: list[IndividualSlot] = []
    for item in split_csv(raw):
        day, sep, period = item.partition("-")
        if sep and day and period:
            slots.append(IndividualSlot(day=day, period=period))
    return slots


class GroupApplyWizard:
    """select → login → payment → confirm → complete."""

    def __init__(
        self,
        course_ids: Iterable[str] = (),
        payment_method: PaymentMethodEnum = DEFAULT_PAYMENT_METHOD,
        step: GroupStep = GroupStep.SELECT,
    ) -> None:
        self.course_ids: list[str] = []
        for course_id in course_ids:
            if course_id not in self.course_ids:
                self.course_ids.append(course_id)
        self.payment_method = payment_method
        self.step = step

    @classmethod
    def from_query(cls, params: Mapping[str, str], step: GroupStep = GroupStep.SELECT) -> "GroupApplyWizard":
        """Rebuild from ``courses=a,b&payment=...``."""
        return cls(
            course_ids=split_csv(params.get("courses")),
            payment_method=payment_method_or_default(params.get("payment")),
            step=step,
        )

    def to_query_string(self) -> str:
        params = {"courses": ",".join(self.course_ids)}
        if self.step in (GroupStep.CONFIRM, GroupStep.COMPLETE):
            params["payment"] = self.payment_method.value
        return urlencode(params, safe=",")

    @property
    def path(self) -> str:
        return f"{GROUP_STEP_PATHS[self.step]}?{self.to_query_string()}"

    def toggle_course(self, course_id: str) -> bool:
        """Add or remove a course; returns whether it is now selected."""
        if course_id in self.course_ids:
            self.course_ids.remove(course_id)
            return False
        self.course_ids.append(course_id)
        return True

    def select_payment_method(self, payment_method: PaymentMethodEnum) -> None:
        self.payment_method = payment_method

    def can_proceed(self) -> bool:
        if self.step == GroupStep.COMPLETE:
            return False
        return bool(self.course_ids)

    def _login_redirect(self) -> str:
        return f"{GROUP_STEP_PATHS[GroupStep.LOGIN]}?courses={','.join(self.course_ids)}"

    def advance(self, *, authenticated: bool) -> WizardTransition:
        """Move one step forward.

        Signed-in users skip the login step. Reaching payment or confirm
        without a session leaves the wizard in place and reports a login
        redirect that carries the selected courses.
        """
        if self.step == GroupStep.COMPLETE:
            raise ValidationFailedException([MSG_ALREADY_COMPLETE])
        if not self.can_proceed():
            raise ValidationFailedException([MSG_SELECT_COURSE])

        target = GROUP_STEPS[GROUP_STEPS.index(self.step) + 1]
        if target == GroupStep.LOGIN and authenticated:
            target = GroupStep.PAYMENT
        if target in (GroupStep.PAYMENT, GroupStep.CONFIRM) and not authenticated:
            return WizardTransition(step=self.step, path=self.path, login_redirect=self._login_redirect())

        self.step = target
        return WizardTransition(step=self.step, path=self.path)

    def back(self) -> None:
        index = GROUP_STEPS.index(self.step)
        if 0 < index < len(GROUP_STEPS) - 1:
            self.step = GROUP_STEPS[index - 1]
            if self.step == GroupStep.LOGIN:
                self.step = GroupStep.SELECT

    def reconcile(self, courses: Iterable[SelectableCourse]) -> list[str]:
        """Drop ids that no longer exist or are not open; return the dropped ids."""
        open_ids = {str(course.id) for course in courses if course.status == CourseStatusEnum.OPEN}
        removed = [course_id for course_id in self.course_ids if course_id not in open_ids]
        self.course_ids = [course_id for course_id in self.course_ids if course_id in open_ids]
        return removed

    def build_request(self) -> EnrollmentRequest:
        return EnrollmentRequest(course_ids=list(self.course_ids), payment_method=self.payment_method.value)


class IndividualApplyWizard:
    """timeslot → subject → format → payment → confirm → complete."""

    def __init__(
        self,
        slots: Iterable[IndividualSlot] = (),
        subjects: Iterable[str] = (),
        format: CourseTypeEnum = DEFAULT_INDIVIDUAL_FORMAT,
        friend_names: Iterable[str] = (),
        payment_method: PaymentMethodEnum = DEFAULT_PAYMENT_METHOD,
        step: IndividualStep = IndividualStep.TIMESLOT,
    ) -> None:
        self.slots: list[IndividualSlot] = []
        for slot in slots:
            if slot.key not in {existing.key for existing in self.slots}:
                self.slots.append(slot)
        self.subjects: list[str] = list(dict.fromkeys(subjects))
        self.format = format
        names = list(friend_names)[:MAX_COMPANIONS]
        self.friend_names: list[str] = names + [""] * (MAX_COMPANIONS - len(names))
        self.payment_method = payment_method
        self.step = step

    def toggle_slot(self, day: str, period: str) -> bool:
        """Add or remove a day/period pair; returns whether it is now selected."""
        key = f"{day}-{period}"
        for slot in self.slots:
            if slot.key == key:
                self.slots.remove(slot)
                return False
        self.slots.append(IndividualSlot(day=day, period=period))
        return True

    def toggle_subject(self, subject: str) -> bool:
        if subject in self.subjects:
            self.subjects.remove(subject)
            return False
        self.subjects.append(subject)
        return True

    def select_format(self, format: CourseTypeEnum) -> None:
        self.format = format

    def set_friend_name(self, index: int, name: str) -> None:
        if not 0 <= index < MAX_COMPANIONS:
            raise IndexError(f"companion index out of range: {index}")
        self.friend_names[index] = name

    def select_payment_method(self, payment_method: PaymentMethodEnum) -> None:
        self.payment_method = payment_method

    @property
    def required_companions(self) -> int:
        return FORMAT_COMPANIONS.get(self.format, 0)

    @property
    def companion_names(self) -> list[str]:
        """Filled-in names the current format asks for."""
        return [name.strip() for name in self.friend_names[: self.required_companions] if name.strip()]

    def _blocking_error(self) -> str | None:
        if self.step == IndividualStep.TIMESLOT and not self.slots:
            return MSG_SELECT_SLOT
        if self.step == IndividualStep.SUBJECT and not self.subjects:
            return MSG_SELECT_SUBJECT
        if self.step == IndividualStep.FORMAT and len(self.companion_names) < self.required_companions:
            return MSG_COMPANION_REQUIRED
        return None

    def can_proceed(self) -> bool:
        if self.step == IndividualStep.COMPLETE:
            return False
        return self._blocking_error() is None

    def advance(self, *, authenticated: bool) -> WizardTransition:
        """Move forward; entering confirm needs a session.

        Without one the wizard stays on payment and the transition carries
        the sign-in URL that comes back to the restore page. Callers park
        :meth:`snapshot` before following it.
        """
        if self.step == IndividualStep.COMPLETE:
            raise ValidationFailedException([MSG_ALREADY_COMPLETE])
        error = self._blocking_error()
        if error is not None:
            raise ValidationFailedException([error])

        target = INDIVIDUAL_STEPS[INDIVIDUAL_STEPS.index(self.step) + 1]
        if target == IndividualStep.CONFIRM and not authenticated:
            return WizardTransition(
                step=self.step,
                path=INDIVIDUAL_APPLY_PATH,
                login_redirect=f"{STUDENT_LOGIN_PAGE}?next={quote(INDIVIDUAL_RESTORE_PATH, safe='')}",
            )
        self.step = target
        return WizardTransition(step=self.step, path=INDIVIDUAL_APPLY_PATH)

    def back(self) -> None:
        index = INDIVIDUAL_STEPS.index(self.step)
        if 0 < index < len(INDIVIDUAL_STEPS) - 1:
            self.step = INDIVIDUAL_STEPS[index - 1]

    def slots_query(self) -> str:
        return format_slots(self.slots)

    def snapshot(self) -> dict[str, object]:
        """State parked across the sign-in redirect."""
        return {
            "slots": [slot.model_dump() for slot in self.slots],
            "subjects": list(self.subjects),
            "format": self.format.value,
            "friendNames": list(self.friend_names),
            "paymentMethod": self.payment_method.value,
        }

    @classmethod
    def restore(cls, snapshot: Mapping[str, object]) -> "IndividualApplyWizard":
        """Rebuild a parked wizard directly on the confirm step."""
        try:
            fmt = CourseTypeEnum(snapshot.get("format"))
        except ValueError:
            fmt = DEFAULT_INDIVIDUAL_FORMAT
        if fmt not in FORMAT_COMPANIONS:
            fmt = DEFAULT_INDIVIDUAL_FORMAT
        return cls(
            slots=[IndividualSlot.model_validate(item) for item in snapshot.get("slots") or []],
            subjects=[str(item) for item in snapshot.get("subjects") or []],
            format=fmt,
            friend_names=[str(item) for item in snapshot.get("friendNames") or []],
            payment_method=payment_method_or_default(snapshot.get("paymentMethod")),
            step=IndividualStep.CONFIRM,
        )

    def build_request(self) -> EnrollmentRequest:
        return EnrollmentRequest(
            type=INDIVIDUAL_ENROLLMENT_TYPE,
            slots=list(self.slots),
            subjects=list(self.subjects),
            course_count=len(self.subjects),
            format=self.format.value,
            friend_names=self.companion_names,
            payment_method=self.payment_method.value,
        )
