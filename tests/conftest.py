from __future__ import annotations

from collections.abc import Callable
from datetime import time
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from app.core.enums import CourseStatusEnum, CourseTypeEnum, RoleEnum


@pytest.fixture()
def make_course() -> Callable[..., SimpleNamespace]:
    def _make_course(**overrides: object) -> SimpleNamespace:
        values: dict[str, object] = {
            "id": uuid4(),
            "category_id": uuid4(),
            "term_id": None,
            "name": "英語 基礎",
            "subject": "英語",
            "description": "",
            "instructor_name": "山田",
            "course_type": CourseTypeEnum.GROUP,
            "day_of_week": "月",
            "start_time": time(15, 30),
            "end_time": time(16, 50),
            "classroom": "A101",
            "capacity": 20,
            "price": 11000,
            "target_grade": "高1",
            "status": CourseStatusEnum.OPEN,
            "display_order": 0,
        }
        values.update(overrides)
        return SimpleNamespace(**values)

    return _make_course


@pytest.fixture()
def make_profile() -> Callable[..., SimpleNamespace]:
    def _make_profile(email: str = "taro@shukutoku.ed.jp", profile_id: UUID | None = None) -> SimpleNamespace:
        return SimpleNamespace(
            id=profile_id or uuid4(),
            email=email,
            role=RoleEnum.STUDENT,
            display_name="Taro",
            avatar_url=None,
            student_number=None,
            grade=None,
        )

    return _make_profile
