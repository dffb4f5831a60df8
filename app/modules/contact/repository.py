"""Contact repository layer."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.contact.models import ContactSubmission


class ContactRepository:
    """DB operations for contact submissions."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_submission(self, submission: ContactSubmission) -> ContactSubmission:
        self.session.add(submission)
        await self.session.flush()
        return submission
