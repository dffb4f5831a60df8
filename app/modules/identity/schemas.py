"""Identity schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.enums import RoleEnum


class ProfileRead(BaseModel):
    """Profile output schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: RoleEnum
    display_name: str
    avatar_url: str | None = None
    student_number: str | None = None
    grade: int | None = None
