"""Identity repository layer."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import RoleEnum
from app.modules.identity.models import Profile


class IdentityRepository:
    """DB operations for profiles."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_profile_by_id(self, profile_id: UUID) -> Profile | None:
        return await self.session.get(Profile, profile_id)

    async def get_profile_by_email(self, email: str) -> Profile | None:
        stmt = select(Profile).where(Profile.email == email)
        return await self.session.scalar(stmt)

    async def create_profile(
        self,
        email: str,
        display_name: str,
        avatar_url: str | None,
    ) -> Profile:
        profile = Profile(
            email=email,
            display_name=display_name,
            avatar_url=avatar_url,
            role=RoleEnum.STUDENT,
        )
        self.session.add(profile)
        await self.session.flush()
        return profile

    async def save(self, profile: Profile) -> Profile:
        await self.session.flush()
        return profile
