"""Identity ORM models."""

from __future__ import annotations

from sqlalchemy import Enum as SAEnum
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, BaseModelMixin, enum_values
from app.core.enums import RoleEnum


class Profile(BaseModelMixin, Base):
    """Portal profile keyed by the identity provider account email."""

    __tablename__ = "profiles"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    role: Mapped[RoleEnum] = mapped_column(
        SAEnum(RoleEnum, name="user_role_enum", native_enum=False, values_callable=enum_values),
        default=RoleEnum.STUDENT,
        nullable=False,
    )
    display_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    student_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    grade: Mapped[int | None] = mapped_column(Integer, nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    parent_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    parent_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
