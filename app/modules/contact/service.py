"""Contact business logic layer."""

from __future__ import annotations

import logging
import re

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.enums import ContactCategoryEnum, ContactStatusEnum
from app.core.metrics import CONTACT_SUBMISSIONS_TOTAL
from app.modules.contact.models import ContactSubmission
from app.modules.contact.repository import ContactRepository
from app.modules.contact.schemas import ContactRequest, ContactResult
from app.shared.exceptions import BackendException, ValidationFailedException

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MESSAGE_MIN_LENGTH = 10
VALID_CATEGORIES = {category.value for category in ContactCategoryEnum}

MSG_RECEIVED = "お問い合わせを受け付けました。"
MSG_SEND_FAILED = "送信に失敗しました。時間をおいて再度お試しください。"


def _blank(value: str | None) -> bool:
    return not value or not value.strip()


def validate_contact_submission(payload: ContactRequest) -> list[str]:
    """Collect one message per violated rule, in form order."""
    errors: list[str] = []

    if _blank(payload.name):
        errors.append("お名前は必須です")

    if _blank(payload.email):
        errors.append("メールアドレスは必須です")
    elif not EMAIL_PATTERN.match(payload.email):
        errors.append("正しいメールアドレスを入力してください")

    if not payload.category:
        errors.append("お問い合わせカテゴリは必須です")
    elif payload.category not in VALID_CATEGORIES:
        errors.append("無効なカテゴリです")

    if _blank(payload.subject):
        errors.append("件名は必須です")

    if _blank(payload.message):
        errors.append("お問い合わせ内容は必須です")
    elif len(payload.message.strip()) < MESSAGE_MIN_LENGTH:
        errors.append(f"お問い合わせ内容は{MESSAGE_MIN_LENGTH}文字以上で入力してください")

    return errors


class ContactService:
    """Validates and stores contact form submissions."""

    def __init__(self, repository: ContactRepository) -> None:
        self.repository = repository

    async def submit(self, payload: ContactRequest) -> ContactResult:
        errors = validate_contact_submission(payload)
        if errors:
            CONTACT_SUBMISSIONS_TOTAL.labels(outcome="rejected").inc()
            raise ValidationFailedException(errors)

        phone = payload.phone.strip() if payload.phone else ""
        submission = ContactSubmission(
            name=payload.name.strip(),
            email=payload.email.strip(),
            phone=phone or None,
            category=ContactCategoryEnum(payload.category),
            subject=payload.subject.strip(),
            message=payload.message.strip(),
            status=ContactStatusEnum.NEW,
        )
        try:
            created = await self.repository.create_submission(submission)
        except SQLAlchemyError as exc:
            CONTACT_SUBMISSIONS_TOTAL.labels(outcome="failed").inc()
            logger.exception("Failed to insert contact submission")
            raise BackendException(MSG_SEND_FAILED) from exc

        CONTACT_SUBMISSIONS_TOTAL.labels(outcome="accepted").inc()
        logger.info("Contact submission %s stored (category=%s)", created.id, created.category)
        return ContactResult(message=MSG_RECEIVED, id=created.id)


async def get_contact_service(session: AsyncSession = Depends(get_db_session)) -> ContactService:
    """Dependency provider for contact service."""
    return ContactService(ContactRepository(session))
