from __future__ import annotations

from collections.abc import AsyncIterator
from types import SimpleNamespace
from uuid import UUID, uuid4

import httpx
import pytest
import pytest_asyncio

from app.core.database import get_db_session
from app.main import app
from app.modules.enrollment.service import EnrollmentService, get_enrollment_service
from app.modules.identity.service import get_current_student, get_current_user


class FakeCatalogRepository:
    def __init__(self, courses: list[SimpleNamespace]) -> None:
        self._courses = {course.id: course for course in courses}

    async def get_courses_by_ids(self, course_ids: list[UUID]) -> list[SimpleNamespace]:
        return [self._courses[course_id] for course_id in course_ids if course_id in self._courses]

    async def get_active_term(self) -> None:
        return None


class FakeEnrollmentRepository:
    def __init__(self) -> None:
        self.inserted: list[object] = []

    async def find_active_course_ids(self, student_id: UUID, course_ids: list[UUID]) -> list[UUID]:
        return []

    async def create_enrollments(self, enrollments: list[object]) -> list[object]:
        self.inserted.extend(enrollments)
        return list(enrollments)


async def _no_db_session() -> AsyncIterator[None]:
    yield None


@pytest_asyncio.fixture()
async def client() -> AsyncIterator[httpx.AsyncClient]:
    app.dependency_overrides[get_db_session] = _no_db_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as api_client:
        yield api_client
    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_enroll_without_session_returns_401(client: httpx.AsyncClient) -> None:
    response = await client.post("/api/enroll", json={"courseIds": [str(uuid4())], "paymentMethod": "bank_transfer"})

    assert response.status_code == 401
    body = response.json()
    assert body["error"] == "ログインが必要です。"
    assert body["code"] == "unauthenticated"


@pytest.mark.asyncio
async def test_enroll_with_outside_domain_returns_403(client: httpx.AsyncClient, make_profile) -> None:
    app.dependency_overrides[get_current_user] = lambda: make_profile(email="taro@gmail.com")

    response = await client.post("/api/enroll", json={"courseIds": [str(uuid4())], "paymentMethod": "bank_transfer"})

    assert response.status_code == 403
    assert response.json()["error"] == "@shukutoku.ed.jp のメールアドレスでログインしてください。"


@pytest.mark.asyncio
async def test_enroll_group_returns_201_with_count(
    client: httpx.AsyncClient,
    make_course,
    make_profile,
) -> None:
    courses = [make_course(), make_course(subject="数学")]
    enrollment_repo = FakeEnrollmentRepository()
    app.dependency_overrides[get_current_student] = lambda: make_profile()
    app.dependency_overrides[get_enrollment_service] = lambda: EnrollmentService(
        enrollment_repo,
        FakeCatalogRepository(courses),
    )

    response = await client.post(
        "/api/enroll",
        json={"courseIds": [str(course.id) for course in courses], "paymentMethod": "account_transfer_installment"},
    )

    assert response.status_code == 201
    assert response.json() == {"success": True, "message": "申し込みが完了しました。", "enrollmentCount": 2}
    assert len(enrollment_repo.inserted) == 2


@pytest.mark.asyncio
async def test_enroll_validation_failure_uses_error_shape(client: httpx.AsyncClient, make_profile) -> None:
    app.dependency_overrides[get_current_student] = lambda: make_profile()
    app.dependency_overrides[get_enrollment_service] = lambda: EnrollmentService(
        FakeEnrollmentRepository(),
        FakeCatalogRepository([]),
    )

    response = await client.post("/api/enroll", json={"type": "individual", "slots": [], "subjects": ["英語"]})

    assert response.status_code == 400
    assert response.json() == {
        "error": "時間帯を選択してください。",
        "errors": ["時間帯を選択してください。"],
        "code": "validation_error",
    }


@pytest.mark.asyncio
async def test_malformed_body_is_reported_as_400(client: httpx.AsyncClient, make_profile) -> None:
    app.dependency_overrides[get_current_student] = lambda: make_profile()
    app.dependency_overrides[get_enrollment_service] = lambda: EnrollmentService(
        FakeEnrollmentRepository(),
        FakeCatalogRepository([]),
    )

    response = await client.post("/api/enroll", json={"courseIds": "not-a-list"})

    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"
