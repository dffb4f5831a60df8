from __future__ import annotations

from datetime import UTC, datetime
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from app.core.enums import EnrollmentStatusEnum, PaymentMethodEnum, PaymentStatusEnum
from app.modules.enrollment.schemas import IndividualEnrollmentNotes
from app.modules.enrollment.service import EnrollmentService


def _enrollment(
    *,
    course: SimpleNamespace | None = None,
    term_id: UUID | None = None,
    status: EnrollmentStatusEnum = EnrollmentStatusEnum.PENDING,
    payment_status: PaymentStatusEnum = PaymentStatusEnum.UNPAID,
    amount: int = 0,
    notes: str | None = None,
) -> SimpleNamespace:
    return SimpleNamespace(
        id=uuid4(),
        course_id=course.id if course else None,
        term_id=term_id,
        status=status,
        payment_method=PaymentMethodEnum.BANK_TRANSFER,
        payment_status=payment_status,
        payment_amount=amount,
        payment_due_date=None,
        notes=notes,
        enrolled_at=datetime(2026, 4, 1, tzinfo=UTC),
        confirmed_at=None,
        course=course,
    )


class FakeEnrollmentRepository:
    def __init__(self, enrollments: list[SimpleNamespace]) -> None:
        self._enrollments = enrollments

    async def list_student_enrollments(self, student_id: UUID) -> list[SimpleNamespace]:
        return list(self._enrollments)


class FakeCatalogRepository:
    def __init__(self, term: SimpleNamespace | None) -> None:
        self._term = term

    async def get_active_term(self) -> SimpleNamespace | None:
        return self._term


@pytest.mark.asyncio
async def test_list_enrollments_exposes_labels_and_individual_notes(make_course) -> None:
    course = make_course(price=11000)
    notes = IndividualEnrollmentNotes(
        day="金",
        period="2限",
        subjects=["数学"],
        course_count=1,
        format="individual_1on1",
    ).to_json()
    rows = [
        _enrollment(course=course, amount=11000),
        _enrollment(notes=notes),
        _enrollment(notes="持ち物: 筆記用具"),
    ]
    service = EnrollmentService(FakeEnrollmentRepository(rows), FakeCatalogRepository(None))

    result = await service.list_enrollments(SimpleNamespace(id=uuid4()))

    assert result[0].course is not None
    assert result[0].course.schedule_label == "月曜 15:30〜16:50"
    assert result[0].status_label == "申込中"
    assert result[0].payment_status_label == "未払い"
    assert result[0].payment_method_label == "銀行振込"
    assert result[0].individual is None
    assert result[1].individual is not None
    assert result[1].individual.day == "金"
    assert result[1].individual.period == "2限"
    assert result[2].individual is None


@pytest.mark.asyncio
async def test_payments_overview_keeps_active_term_rows_and_totals(make_course) -> None:
    term = SimpleNamespace(id=uuid4(), name="2026年度 1学期")
    current_course = make_course(term_id=term.id, price=11000)
    old_course = make_course(term_id=uuid4(), price=9000)
    rows = [
        _enrollment(course=current_course, amount=11000, payment_status=PaymentStatusEnum.PAID),
        _enrollment(course=current_course, term_id=term.id, amount=15000),
        _enrollment(course=old_course, amount=9000),
        _enrollment(term_id=term.id, amount=0),
        _enrollment(
            course=current_course,
            amount=11000,
            status=EnrollmentStatusEnum.CANCELLED,
        ),
    ]
    service = EnrollmentService(FakeEnrollmentRepository(rows), FakeCatalogRepository(term))

    overview = await service.get_payments_overview(SimpleNamespace(id=uuid4()))

    assert overview.term_name == "2026年度 1学期"
    assert len(overview.enrollments) == 4
    assert overview.total_amount == 26000
    assert overview.paid_amount == 11000
    assert overview.outstanding_amount == 15000


@pytest.mark.asyncio
async def test_payments_overview_without_active_term_lists_everything(make_course) -> None:
    rows = [
        _enrollment(course=make_course(term_id=uuid4()), amount=11000),
        _enrollment(
            course=make_course(term_id=uuid4()),
            amount=5000,
            payment_status=PaymentStatusEnum.REFUNDED,
        ),
    ]
    service = EnrollmentService(FakeEnrollmentRepository(rows), FakeCatalogRepository(None))

    overview = await service.get_payments_overview(SimpleNamespace(id=uuid4()))

    assert overview.term_name is None
    assert len(overview.enrollments) == 2
    assert overview.total_amount == 11000
    assert overview.outstanding_amount == 11000
