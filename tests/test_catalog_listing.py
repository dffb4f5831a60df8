from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import date
from types import SimpleNamespace
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio

from app.core.database import get_db_session
from app.core.enums import CourseStatusEnum
from app.main import app
from app.modules.catalog.schemas import CourseRead
from app.modules.catalog.service import (
    CatalogService,
    get_catalog_service,
    group_courses_by_category,
    group_courses_by_subject,
)
from app.shared.exceptions import NotFoundException


def _category(slug: str, order: int) -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), name=slug, slug=slug, display_order=order, description=None)


def _term() -> SimpleNamespace:
    return SimpleNamespace(
        id=uuid4(),
        name="2026年度 1学期",
        slug="2026-1",
        start_date=date(2026, 4, 1),
        end_date=date(2026, 7, 31),
        enrollment_start=None,
        enrollment_end=None,
        is_active=True,
    )


class FakeCatalogRepository:
    def __init__(self, term, categories, courses, tuition=()) -> None:
        self.term = term
        self.categories = categories
        self.courses = courses
        self.tuition = list(tuition)
        self.course_queries: list[tuple[object, object]] = []

    async def get_active_term(self):
        return self.term

    async def list_categories(self):
        return self.categories

    async def list_courses(self, term_id, status=None):
        self.course_queries.append((term_id, status))
        return [course for course in self.courses if status is None or course.status == status]

    async def list_tuition_info(self):
        return self.tuition


def test_subjects_follow_fixed_order_and_skip_empty(make_course) -> None:
    courses = [
        CourseRead.model_validate(make_course(subject="数学", name="数学 A")),
        CourseRead.model_validate(make_course(subject="英語", name="英語 A")),
        CourseRead.model_validate(make_course(subject="情報", name="情報 A")),
        CourseRead.model_validate(make_course(subject="英語", name="英語 B")),
    ]

    grouped = group_courses_by_subject(courses)

    assert [group.subject for group in grouped] == ["英語", "数学", "情報"]
    assert [course.name for course in grouped[0].courses] == ["英語 A", "英語 B"]


def test_every_category_is_listed_even_when_empty(make_course) -> None:
    general = _category("general", 1)
    junior = _category("junior", 2)
    course = make_course(category_id=general.id, start_time="16:40:00", end_time="18:00:00")

    grouped = group_courses_by_category([general, junior], [course], split_subjects=False)

    assert [group.category.slug for group in grouped] == ["general", "junior"]
    assert grouped[0].courses[0].schedule_label == "月曜 16:40〜18:00"
    assert grouped[0].subjects == []
    assert grouped[1].courses == []


@pytest.mark.asyncio
async def test_apply_courses_only_include_open_courses(make_course) -> None:
    general = _category("general", 1)
    term = _term()
    repository = FakeCatalogRepository(
        term,
        [general],
        [
            make_course(category_id=general.id),
            make_course(category_id=general.id, status=CourseStatusEnum.CLOSED),
            make_course(category_id=general.id, status=CourseStatusEnum.DRAFT),
        ],
    )

    catalog = await CatalogService(repository).get_apply_courses()

    assert catalog.term is not None
    assert catalog.term.name == "2026年度 1学期"
    assert repository.course_queries == [(term.id, CourseStatusEnum.OPEN)]
    assert len(catalog.categories[0].courses) == 1
    assert catalog.categories[0].courses[0].is_selectable is True


@pytest.mark.asyncio
async def test_course_catalog_without_active_term_is_unfiltered(make_course) -> None:
    general = _category("general", 1)
    repository = FakeCatalogRepository(None, [general], [make_course(category_id=general.id)])

    catalog = await CatalogService(repository).get_course_catalog()

    assert catalog.term is None
    assert repository.course_queries == [(None, None)]
    assert catalog.categories[0].subjects[0].subject == "英語"


@pytest.mark.asyncio
async def test_require_active_term_raises_not_found() -> None:
    with pytest.raises(NotFoundException):
        await CatalogService(FakeCatalogRepository(None, [], [])).require_active_term()


@pytest.mark.asyncio
async def test_tuition_overview_lists_fixed_plans() -> None:
    overview = await CatalogService(FakeCatalogRepository(None, [], [])).get_tuition_overview()

    assert overview.group_plan.price == 11000
    assert [(plan.key, plan.price) for plan in overview.individual_plans] == [
        ("individual_1on1", 24000),
        ("individual_1on2", 19000),
        ("individual_1on3", 15000),
    ]
    assert overview.rows == []


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
async def test_active_term_endpoint_returns_404_without_term(client: httpx.AsyncClient) -> None:
    app.dependency_overrides[get_catalog_service] = lambda: CatalogService(FakeCatalogRepository(None, [], []))

    response = await client.get("/api/catalog/terms/active")

    assert response.status_code == 404
    assert response.json()["error"] == "現在受付中の会期はありません。"


@pytest.mark.asyncio
async def test_courses_endpoint_groups_by_category(client: httpx.AsyncClient, make_course) -> None:
    general = _category("general", 1)
    repository = FakeCatalogRepository(_term(), [general], [make_course(category_id=general.id)])
    app.dependency_overrides[get_catalog_service] = lambda: CatalogService(repository)

    response = await client.get("/api/catalog/courses")

    assert response.status_code == 200
    body = response.json()
    assert body["term"]["slug"] == "2026-1"
    assert body["categories"][0]["courses"][0]["schedule_label"] == "月曜 15:30〜16:50"
