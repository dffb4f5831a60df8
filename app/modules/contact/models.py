"""Contact form ORM models."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, BaseModelMixin, enum_values
from app.core.enums import ContactCategoryEnum, ContactStatusEnum


class ContactSubmission(BaseModelMixin, Base):
    """Inquiry sent from the public contact form."""

    __tablename__ = "contact_submissions"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    category: Mapped[ContactCategoryEnum] = mapped_column(
        SAEnum(ContactCategoryEnum, name="contact_category_enum", native_enum=False, values_callable=enum_values),
        nullable=False,
    )
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[ContactStatusEnum] = mapped_column(
        SAEnum(ContactStatusEnum, name="contact_status_enum", native_enum=False, values_callable=enum_values),
        default=ContactStatusEnum.NEW,
        nullable=False,
        index=True,
    )
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
