from __future__ import annotations

import json
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import OperationalError

from app.core.enums import CourseStatusEnum, EnrollmentStatusEnum, PaymentMethodEnum, PaymentStatusEnum
from app.modules.enrollment.schemas import EnrollmentRequest
from app.modules.enrollment.service import EnrollmentService
from app.shared.exceptions import BackendException, ValidationFailedException


class FakeCatalogRepository:
    def __init__(self, courses: list[SimpleNamespace] | None = None, term: SimpleNamespace | None = None) -> None:
        self._courses = {course.id: course for course in courses or []}
        self._term = term

    async def get_courses_by_ids(self, course_ids: list[UUID]) -> list[SimpleNamespace]:
        return [self._courses[course_id] for course_id in course_ids if course_id in self._courses]

    async def get_active_term(self) -> SimpleNamespace | None:
        return self._term


class FakeEnrollmentRepository:
    def __init__(self, active_course_ids: set[UUID] | None = None, fail_insert: bool = False) -> None:
        self._active = active_course_ids or set()
        self.fail_insert = fail_insert
        self.inserted: list[object] = []
        self.insert_calls = 0

    async def find_active_course_ids(self, student_id: UUID, course_ids: list[UUID]) -> list[UUID]:
        return [course_id for course_id in course_ids if course_id in self._active]

    async def create_enrollments(self, enrollments: list[object]) -> list[object]:
        self.insert_calls += 1
        if self.fail_insert:
            raise OperationalError("INSERT", {}, Exception("connection lost"))
        self.inserted.extend(enrollments)
        return list(enrollments)


def _student() -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), email="hanako@shukutoku.ed.jp")


def _group_request(course_ids: list[object], payment_method: str = "bank_transfer") -> EnrollmentRequest:
    return EnrollmentRequest.model_validate(
        {"courseIds": [str(course_id) for course_id in course_ids], "paymentMethod": payment_method},
    )


def _individual_request(**overrides: object) -> EnrollmentRequest:
    payload: dict[str, object] = {
        "type": "individual",
        "slots": [{"day": "月", "period": "1限"}],
        "subjects": ["英語"],
        "format": "individual_1on1",
        "paymentMethod": "bank_transfer",
    }
    payload.update(overrides)
    return EnrollmentRequest.model_validate(payload)


@pytest.mark.asyncio
async def test_group_enrollment_creates_one_pending_row_per_course(make_course) -> None:
    term_id = uuid4()
    first = make_course(price=11000, term_id=term_id)
    second = make_course(price=15000, term_id=term_id)
    enrollment_repo = FakeEnrollmentRepository()
    service = EnrollmentService(enrollment_repo, FakeCatalogRepository([first, second]))

    result = await service.enroll(_group_request([first.id, second.id]), _student())

    assert result.success is True
    assert result.enrollment_count == 2
    assert result.message == "申し込みが完了しました。"
    assert [row.course_id for row in enrollment_repo.inserted] == [first.id, second.id]
    assert [row.payment_amount for row in enrollment_repo.inserted] == [11000, 15000]
    for row in enrollment_repo.inserted:
        assert row.status == EnrollmentStatusEnum.PENDING
        assert row.payment_status == PaymentStatusEnum.UNPAID
        assert row.payment_method == PaymentMethodEnum.BANK_TRANSFER
        assert row.term_id == term_id


@pytest.mark.asyncio
async def test_group_enrollment_with_closed_course_inserts_nothing(make_course) -> None:
    open_course = make_course()
    closed_course = make_course(status=CourseStatusEnum.CLOSED)
    enrollment_repo = FakeEnrollmentRepository()
    service = EnrollmentService(enrollment_repo, FakeCatalogRepository([open_course, closed_course]))

    with pytest.raises(ValidationFailedException) as exc:
        await service.enroll(_group_request([open_course.id, closed_course.id]), _student())

    assert exc.value.errors == ["受付終了した講座が含まれています。"]
    assert enrollment_repo.insert_calls == 0


@pytest.mark.asyncio
async def test_group_enrollment_rejects_already_enrolled_course(make_course) -> None:
    course = make_course()
    enrollment_repo = FakeEnrollmentRepository(active_course_ids={course.id})
    service = EnrollmentService(enrollment_repo, FakeCatalogRepository([course]))

    with pytest.raises(ValidationFailedException) as exc:
        await service.enroll(_group_request([course.id]), _student())

    assert exc.value.errors == ["既に申し込み済みの講座が含まれています。"]
    assert enrollment_repo.insert_calls == 0


@pytest.mark.asyncio
async def test_group_enrollment_rejects_unknown_or_malformed_ids(make_course) -> None:
    course = make_course()
    service = EnrollmentService(FakeEnrollmentRepository(), FakeCatalogRepository([course]))

    with pytest.raises(ValidationFailedException) as unknown:
        await service.enroll(_group_request([course.id, uuid4()]), _student())
    with pytest.raises(ValidationFailedException) as malformed:
        await service.enroll(_group_request(["not-a-uuid"]), _student())

    assert unknown.value.errors == ["選択された講座の一部が見つかりません。"]
    assert malformed.value.errors == ["選択された講座の一部が見つかりません。"]


@pytest.mark.asyncio
async def test_group_enrollment_ignores_repeated_course_id(make_course) -> None:
    course = make_course()
    enrollment_repo = FakeEnrollmentRepository()
    service = EnrollmentService(enrollment_repo, FakeCatalogRepository([course]))

    result = await service.enroll(_group_request([course.id, course.id]), _student())

    assert result.enrollment_count == 1


@pytest.mark.asyncio
async def test_group_enrollment_requires_courses_and_known_payment_method(make_course) -> None:
    course = make_course()
    service = EnrollmentService(FakeEnrollmentRepository(), FakeCatalogRepository([course]))

    with pytest.raises(ValidationFailedException) as empty:
        await service.enroll(_group_request([]), _student())
    with pytest.raises(ValidationFailedException) as bad_method:
        await service.enroll(_group_request([course.id], payment_method="cash"), _student())

    assert empty.value.errors == ["講座を選択してください。"]
    assert bad_method.value.errors == ["有効な支払い方法を選択してください。"]


@pytest.mark.asyncio
async def test_group_enrollment_insert_failure_becomes_backend_error(make_course) -> None:
    course = make_course()
    service = EnrollmentService(FakeEnrollmentRepository(fail_insert=True), FakeCatalogRepository([course]))

    with pytest.raises(BackendException) as exc:
        await service.enroll(_group_request([course.id]), _student())

    assert exc.value.status_code == 500
    assert exc.value.message == "申し込みの登録に失敗しました。"


@pytest.mark.asyncio
async def test_individual_enrollment_creates_one_row_per_slot_with_notes() -> None:
    term = SimpleNamespace(id=uuid4(), name="2026年度 夏期")
    enrollment_repo = FakeEnrollmentRepository()
    service = EnrollmentService(enrollment_repo, FakeCatalogRepository(term=term))
    request = _individual_request(
        slots=[{"day": "月", "period": "1限"}, {"day": "土", "period": "4限"}, {"day": "水", "period": "3限"}],
        subjects=["英語", "数学"],
        format="individual_1on2",
        friendNames=["花子"],
    )

    result = await service.enroll(request, _student())

    assert result.enrollment_count == 3
    assert result.message == "個別指導の申し込みが完了しました。"
    assert all(row.course_id is None for row in enrollment_repo.inserted)
    assert all(row.term_id == term.id for row in enrollment_repo.inserted)
    assert all(row.payment_amount == 0 for row in enrollment_repo.inserted)

    notes = json.loads(enrollment_repo.inserted[1].notes)
    assert notes == {
        "type": "individual",
        "day": "土",
        "period": "4限",
        "subjects": ["英語", "数学"],
        "courseCount": 2,
        "format": "individual_1on2",
        "friendNames": ["花子"],
    }


@pytest.mark.asyncio
async def test_individual_enrollment_accepts_legacy_single_subject() -> None:
    enrollment_repo = FakeEnrollmentRepository()
    service = EnrollmentService(enrollment_repo, FakeCatalogRepository())
    payload = {
        "type": "individual",
        "slots": [{"day": "火", "period": "2限"}],
        "subject": "国語",
        "format": "individual_1on1",
        "paymentMethod": "account_transfer_lump",
    }

    result = await service.enroll(EnrollmentRequest.model_validate(payload), _student())

    assert result.enrollment_count == 1
    assert json.loads(enrollment_repo.inserted[0].notes)["subjects"] == ["国語"]
    assert enrollment_repo.inserted[0].term_id is None


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({"slots": []}, "時間帯を選択してください。"),
        ({"slots": [{"day": "日", "period": "1限"}]}, "無効な時間帯が含まれています。"),
        ({"slots": [{"day": "月", "period": "4限"}]}, "無効な時間帯が含まれています。"),
        (
            {"slots": [{"day": "月", "period": "1限"}, {"day": "月", "period": "1限"}]},
            "同じ時間帯が重複しています。",
        ),
        ({"subjects": []}, "教科を選択してください。"),
        ({"subjects": ["音楽"]}, "無効な教科が含まれています。"),
        ({"courseCount": 0}, "受講講座数は1以上で指定してください。"),
        ({"courseCount": -2}, "受講講座数は1以上で指定してください。"),
        ({"format": "group"}, "有効な受講形態を選択してください。"),
        ({"format": "individual_1on3", "friendNames": ["花子"]}, "一緒に受講するご友人のお名前を入力してください。"),
        ({"paymentMethod": "credit_card"}, "有効な支払い方法を選択してください。"),
    ],
)
@pytest.mark.asyncio
async def test_individual_enrollment_rejections_insert_nothing(overrides: dict[str, object], expected: str) -> None:
    enrollment_repo = FakeEnrollmentRepository()
    service = EnrollmentService(enrollment_repo, FakeCatalogRepository())

    with pytest.raises(ValidationFailedException) as exc:
        await service.enroll(_individual_request(**overrides), _student())

    assert exc.value.errors == [expected]
    assert enrollment_repo.insert_calls == 0
