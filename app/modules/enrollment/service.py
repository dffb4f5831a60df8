"""Enrollment business logic layer."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from uuid import UUID

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.constants import ALL_DAYS, FORMAT_COMPANIONS, SUBJECTS, periods_for_day
from app.core.database import get_db_session
from app.core.enums import (
    CourseStatusEnum,
    CourseTypeEnum,
    EnrollmentStatusEnum,
    PaymentMethodEnum,
    PaymentStatusEnum,
)
from app.core.metrics import ENROLLMENT_REJECTIONS_TOTAL, ENROLLMENT_ROWS_CREATED_TOTAL
from app.modules.catalog.repository import CatalogRepository
from app.modules.enrollment.models import Enrollment
from app.modules.enrollment.repository import EnrollmentRepository
from app.modules.enrollment.schemas import (
    EnrollmentRead,
    EnrollmentRequest,
    EnrollmentResult,
    IndividualEnrollmentNotes,
    IndividualSlot,
    PaymentsOverviewRead,
)
from app.modules.identity.models import Profile
from app.shared.exceptions import BackendException, ValidationFailedException

logger = logging.getLogger(__name__)

MSG_SELECT_COURSE = "講座を選択してください。"
MSG_INVALID_PAYMENT_METHOD = "有効な支払い方法を選択してください。"
MSG_COURSE_LOOKUP_FAILED = "講座情報の取得に失敗しました。"
MSG_COURSE_NOT_FOUND = "選択された講座の一部が見つかりません。"
MSG_COURSE_CLOSED = "受付終了した講座が含まれています。"
MSG_ALREADY_ENROLLED = "既に申し込み済みの講座が含まれています。"
MSG_SELECT_SLOT = "時間帯を選択してください。"
MSG_INVALID_SLOT = "無効な時間帯が含まれています。"
MSG_DUPLICATE_SLOT = "同じ時間帯が重複しています。"
MSG_SELECT_SUBJECT = "教科を選択してください。"
MSG_INVALID_SUBJECT = "無効な教科が含まれています。"
MSG_INVALID_COURSE_COUNT = "受講講座数は1以上で指定してください。"
MSG_INVALID_FORMAT = "有効な受講形態を選択してください。"
MSG_COMPANION_REQUIRED = "一緒に受講するご友人のお名前を入力してください。"
MSG_INSERT_FAILED = "申し込みの登録に失敗しました。"
MSG_GROUP_DONE = "申し込みが完了しました。"
MSG_INDIVIDUAL_DONE = "個別指導の申し込みが完了しました。"

INDIVIDUAL_FORMAT_VALUES = {fmt.value for fmt in FORMAT_COMPANIONS}


def parse_payment_method(value: str | None) -> PaymentMethodEnum:
    try:
        return PaymentMethodEnum(value)
    except ValueError as exc:
        raise ValidationFailedException([MSG_INVALID_PAYMENT_METHOD]) from exc


def is_valid_individual_slot(slot: IndividualSlot) -> bool:
    """The slot names a real day and one of that day's period labels."""
    if slot.day not in ALL_DAYS:
        return False
    return slot.period in {period.label for period in periods_for_day(slot.day)}


def unique_course_ids(raw_ids: Sequence[str]) -> list[UUID]:
    """Parse ids keeping first-seen order; a malformed id counts as not found."""
    parsed: list[UUID] = []
    for raw in raw_ids:
        try:
            course_id = UUID(str(raw))
        except ValueError as exc:
            raise ValidationFailedException([MSG_COURSE_NOT_FOUND]) from exc
        if course_id not in parsed:
            parsed.append(course_id)
    return parsed


def validate_individual_request(
    payload: EnrollmentRequest,
) -> tuple[list[IndividualSlot], list[str], CourseTypeEnum, list[str], PaymentMethodEnum]:
    """Check an individual tutoring request; first failing rule wins."""
    slots = payload.slots or []
    if not slots:
        raise ValidationFailedException([MSG_SELECT_SLOT])
    if not all(is_valid_individual_slot(slot) for slot in slots):
        raise ValidationFailedException([MSG_INVALID_SLOT])
    if len({slot.key for slot in slots}) != len(slots):
        raise ValidationFailedException([MSG_DUPLICATE_SLOT])

    subjects = payload.subject_list()
    if not subjects:
        raise ValidationFailedException([MSG_SELECT_SUBJECT])
    if any(subject not in SUBJECTS for subject in subjects):
        raise ValidationFailedException([MSG_INVALID_SUBJECT])
    if payload.course_count is not None and payload.course_count < 1:
        raise ValidationFailedException([MSG_INVALID_COURSE_COUNT])

    if payload.format not in INDIVIDUAL_FORMAT_VALUES:
        raise ValidationFailedException([MSG_INVALID_FORMAT])
    fmt = CourseTypeEnum(payload.format)

    friend_names = [name.strip() for name in payload.friend_names or [] if name and name.strip()]
    if len(friend_names) < FORMAT_COMPANIONS[fmt]:
        raise ValidationFailedException([MSG_COMPANION_REQUIRED])

    payment_method = parse_payment_method(payload.payment_method)
    return slots, subjects, fmt, friend_names, payment_method


class EnrollmentService:
    """Applies the enrollment rules and writes one row per course or slot."""

    def __init__(
        self,
        enrollment_repository: EnrollmentRepository,
        catalog_repository: CatalogRepository,
    ) -> None:
        self.enrollment_repository = enrollment_repository
        self.catalog_repository = catalog_repository

    async def enroll(self, payload: EnrollmentRequest, student: Profile) -> EnrollmentResult:
        enrollment_type = "individual" if payload.is_individual else "group"
        try:
            if payload.is_individual:
                return await self.enroll_individual(payload, student)
            return await self.enroll_group(payload, student)
        except ValidationFailedException:
            ENROLLMENT_REJECTIONS_TOTAL.labels(enrollment_type=enrollment_type).inc()
            raise

    async def enroll_group(self, payload: EnrollmentRequest, student: Profile) -> EnrollmentResult:
        """Enroll the student into every selected course, or into none."""
        raw_ids = payload.course_ids or []
        if not raw_ids:
            raise ValidationFailedException([MSG_SELECT_COURSE])
        payment_method = parse_payment_method(payload.payment_method)
        course_ids = unique_course_ids(raw_ids)

        try:
            courses = await self.catalog_repository.get_courses_by_ids(course_ids)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load courses for enrollment")
            raise BackendException(MSG_COURSE_LOOKUP_FAILED) from exc

        if len(courses) != len(course_ids):
            raise ValidationFailedException([MSG_COURSE_NOT_FOUND])
        if any(course.status != CourseStatusEnum.OPEN for course in courses):
            raise ValidationFailedException([MSG_COURSE_CLOSED])

        try:
            already_enrolled = await self.enrollment_repository.find_active_course_ids(student.id, course_ids)
        except SQLAlchemyError as exc:
            logger.exception("Failed to check existing enrollments")
            raise BackendException(MSG_COURSE_LOOKUP_FAILED) from exc
        if already_enrolled:
            raise ValidationFailedException([MSG_ALREADY_ENROLLED])

        courses_by_id = {course.id: course for course in courses}
        rows = [
            Enrollment(
                student_id=student.id,
                course_id=course_id,
                term_id=courses_by_id[course_id].term_id,
                status=EnrollmentStatusEnum.PENDING,
                payment_method=payment_method,
                payment_status=PaymentStatusEnum.UNPAID,
                payment_amount=courses_by_id[course_id].price,
            )
            for course_id in course_ids
        ]
        created = await self._insert(rows)
        ENROLLMENT_ROWS_CREATED_TOTAL.labels(enrollment_type="group").inc(len(created))
        logger.info("Student %s enrolled in %d course(s)", student.id, len(created))
        return EnrollmentResult(message=MSG_GROUP_DONE, enrollment_count=len(created))

    async def enroll_individual(self, payload: EnrollmentRequest, student: Profile) -> EnrollmentResult:
        """One pending row per selected slot; course stays empty."""
        slots, subjects, fmt, friend_names, payment_method = validate_individual_request(payload)

        try:
            term = await self.catalog_repository.get_active_term()
        except SQLAlchemyError as exc:
            logger.exception("Failed to load active term")
            raise BackendException(MSG_INSERT_FAILED) from exc

        course_count = payload.course_count if payload.course_count is not None else len(subjects)
        rows = [
            Enrollment(
                student_id=student.id,
                course_id=None,
                term_id=term.id if term else None,
                status=EnrollmentStatusEnum.PENDING,
                payment_method=payment_method,
                payment_status=PaymentStatusEnum.UNPAID,
                payment_amount=0,
                notes=IndividualEnrollmentNotes(
                    day=slot.day,
                    period=slot.period,
                    subjects=subjects,
                    course_count=course_count,
                    format=fmt.value,
                    friend_names=friend_names,
                ).to_json(),
            )
            for slot in slots
        ]
        created = await self._insert(rows)
        ENROLLMENT_ROWS_CREATED_TOTAL.labels(enrollment_type="individual").inc(len(created))
        logger.info("Student %s requested %d individual slot(s)", student.id, len(created))
        return EnrollmentResult(message=MSG_INDIVIDUAL_DONE, enrollment_count=len(created))

    async def _insert(self, rows: list[Enrollment]) -> list[Enrollment]:
        try:
            return await self.enrollment_repository.create_enrollments(rows)
        except SQLAlchemyError as exc:
            logger.exception("Enrollment insert failed")
            raise BackendException(MSG_INSERT_FAILED) from exc

    async def list_enrollments(self, student: Profile) -> list[EnrollmentRead]:
        """Student's enrollments, newest first."""
        enrollments = await self.enrollment_repository.list_student_enrollments(student.id)
        return [serialize_enrollment(item) for item in enrollments]

    async def get_payments_overview(self, student: Profile) -> PaymentsOverviewRead:
        """Active term enrollments and what is still owed."""
        term = await self.catalog_repository.get_active_term()
        enrollments = await self.enrollment_repository.list_student_enrollments(student.id)
        if term is not None:
            enrollments = [item for item in enrollments if enrollment_term_id(item) == term.id]
        return build_payments_overview(
            [serialize_enrollment(item) for item in enrollments],
            term.name if term else None,
        )


def enrollment_term_id(enrollment: Enrollment) -> UUID | None:
    """Term of the row itself, else of its course."""
    if enrollment.term_id is not None:
        return enrollment.term_id
    if enrollment.course is not None:
        return enrollment.course.term_id
    return None


def serialize_enrollment(enrollment: Enrollment) -> EnrollmentRead:
    item = EnrollmentRead.model_validate(enrollment)
    if enrollment.course_id is None:
        item = item.model_copy(update={"individual": IndividualEnrollmentNotes.parse(enrollment.notes)})
    return item


def build_payments_overview(enrollments: list[EnrollmentRead], term_name: str | None) -> PaymentsOverviewRead:
    """Totals skip cancelled enrollments and refunded payments."""
    billable = [
        item
        for item in enrollments
        if item.status != EnrollmentStatusEnum.CANCELLED and item.payment_status != PaymentStatusEnum.REFUNDED
    ]
    total = sum(item.payment_amount for item in billable)
    paid = sum(item.payment_amount for item in billable if item.payment_status == PaymentStatusEnum.PAID)
    return PaymentsOverviewRead(
        term_name=term_name,
        enrollments=enrollments,
        total_amount=total,
        paid_amount=paid,
        outstanding_amount=total - paid,
    )


async def get_enrollment_service(session: AsyncSession = Depends(get_db_session)) -> EnrollmentService:
    """Dependency provider for enrollment service."""
    return EnrollmentService(
        enrollment_repository=EnrollmentRepository(session),
        catalog_repository=CatalogRepository(session),
    )
