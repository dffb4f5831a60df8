"""Contact schemas."""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel


class ContactRequest(BaseModel):
    """Contact form body. Every field is checked by the service rules."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    category: str | None = None
    subject: str | None = None
    message: str | None = None


class ContactResult(BaseModel):
    success: bool = True
    message: str
    id: UUID


class ContactCategoryRead(BaseModel):
    value: str
    label: str
