from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime, time, timezone
from types import SimpleNamespace
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio

from app.core.database import get_db_session
from app.core.enums import NoteAudienceEnum
from app.main import app
from app.modules.identity.service import get_current_student
from app.modules.student.service import StudentService, get_student_service, group_assignments_by_day


def _assignment(day: str, start: time, course=None, classroom: str = "B201") -> SimpleNamespace:
    return SimpleNamespace(
        id=uuid4(),
        course_id=course.id if course else uuid4(),
        classroom=classroom,
        day_of_week=day,
        start_time=start,
        end_time=time(start.hour + 1, start.minute),
        effective_date=None,
        notes=None,
        course=course,
    )


def _note(title: str) -> SimpleNamespace:
    return SimpleNamespace(
        id=uuid4(),
        course_id=None,
        target_audience=NoteAudienceEnum.BOTH,
        title=title,
        content="持ち物を確認してください。",
        created_at=datetime(2026, 4, 1, tzinfo=timezone.utc),
        display_order=1,
    )


class FakeStudentRepository:
    def __init__(self, assignments=(), usage_notes=(), instructor_notes=()) -> None:
        self.assignments = list(assignments)
        self.usage_notes = list(usage_notes)
        self.instructor_notes = list(instructor_notes)
        self.requested_term_ids: list[object] = []

    async def list_classroom_assignments(self, term_id):
        self.requested_term_ids.append(term_id)
        return self.assignments

    async def list_usage_notes(self):
        return self.usage_notes

    async def list_instructor_notes_for_students(self):
        return self.instructor_notes


class FakeCatalogRepository:
    def __init__(self, term=None) -> None:
        self.term = term

    async def get_active_term(self):
        return self.term


def test_assignments_are_grouped_by_weekday_in_start_order(make_course) -> None:
    course = make_course(name="英語 発展")
    assignments = [
        _assignment("水", time(17, 0), course),
        _assignment("mon", time(18, 10)),
        _assignment("月", time(15, 30), course),
    ]

    days = group_assignments_by_day(assignments)

    assert [(day.day, day.label) for day in days] == [("月", "月曜日"), ("水", "水曜日")]
    monday = days[0].assignments
    assert [item.start_time for item in monday] == ["15:30", "18:10"]
    assert monday[0].course_name == "英語 発展"
    assert monday[1].course_name == "講座名未設定"


@pytest.mark.asyncio
async def test_classroom_overview_uses_active_term(make_course) -> None:
    term = SimpleNamespace(id=uuid4(), name="2026年度 1学期")
    repository = FakeStudentRepository([_assignment("金", time(16, 40), make_course())])

    overview = await StudentService(repository, FakeCatalogRepository(term)).get_classroom_overview()

    assert repository.requested_term_ids == [term.id]
    assert overview.term_name == "2026年度 1学期"
    assert [day.day for day in overview.days] == ["金"]


@pytest.mark.asyncio
async def test_notes_combine_usage_and_instructor_notes() -> None:
    repository = FakeStudentRepository(usage_notes=[_note("自習室の使い方")], instructor_notes=[_note("小テスト")])

    notes = await StudentService(repository, FakeCatalogRepository()).get_notes()

    assert [note.title for note in notes.usage_notes] == ["自習室の使い方"]
    assert [note.title for note in notes.instructor_notes] == ["小テスト"]


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
async def test_classroom_requires_sign_in(client: httpx.AsyncClient) -> None:
    response = await client.get("/api/student/classroom")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_classroom_endpoint_returns_days(client: httpx.AsyncClient, make_course, make_profile) -> None:
    repository = FakeStudentRepository([_assignment("火", time(15, 30), make_course())])
    app.dependency_overrides[get_current_student] = lambda: make_profile()
    app.dependency_overrides[get_student_service] = lambda: StudentService(repository, FakeCatalogRepository())

    response = await client.get("/api/student/classroom")

    assert response.status_code == 200
    body = response.json()
    assert body["term_name"] is None
    assert body["days"][0]["label"] == "火曜日"
    assert body["days"][0]["assignments"][0]["course_name"] == "英語 基礎"
