"""Catalog repository layer."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.enums import CourseStatusEnum
from app.modules.catalog.models import Course, CourseCategory, Term, TuitionInfo


class CatalogRepository:
    """Read-only queries over terms, categories, courses and tuition."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_active_term(self) -> Term | None:
        stmt = (
            select(Term)
            .where(Term.is_active.is_(True))
            .order_by(Term.display_order.asc(), Term.start_date.desc())
            .limit(1)
        )
        return await self.session.scalar(stmt)

    async def list_categories(self) -> Sequence[CourseCategory]:
        stmt = select(CourseCategory).order_by(CourseCategory.display_order.asc())
        return (await self.session.scalars(stmt)).all()

    async def list_courses(
        self,
        term_id: UUID | None,
        status: CourseStatusEnum | None = None,
    ) -> Sequence[Course]:
        stmt = select(Course).options(selectinload(Course.category))
        if term_id is not None:
            stmt = stmt.where(Course.term_id == term_id)
        if status is not None:
            stmt = stmt.where(Course.status == status)
        stmt = stmt.order_by(Course.display_order.asc(), Course.subject.asc(), Course.name.asc())
        return (await self.session.scalars(stmt)).all()

    async def get_courses_by_ids(self, course_ids: Sequence[UUID]) -> Sequence[Course]:
        if not course_ids:
            return []
        stmt = select(Course).where(Course.id.in_(course_ids))
        return (await self.session.scalars(stmt)).all()

    async def list_tuition_info(self) -> Sequence[TuitionInfo]:
        stmt = select(TuitionInfo).order_by(TuitionInfo.display_order.asc())
        return (await self.session.scalars(stmt)).all()
