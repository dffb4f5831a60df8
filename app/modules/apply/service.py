"""Apply wizard business logic layer."""

from __future__ import annotations

import logging
from urllib.parse import quote, urlencode
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import get_cache_backend
from app.core.config import Settings, get_settings
from app.core.constants import (
    COURSE_TYPE_LABELS,
    FORMAT_COMPANIONS,
    INDIVIDUAL_PRICE_PLANS,
    PAYMENT_METHOD_LABELS,
    SUBJECTS,
)
from app.core.database import get_db_session
from app.modules.apply.drafts import ApplyDraftStore
from app.modules.apply.schemas import (
    DraftCreatedRead,
    FormatOption,
    GroupPreviewRead,
    GroupPreviewRequest,
    IndividualDraftRead,
    IndividualDraftRequest,
    IndividualOptionsRead,
    LabeledOption,
)
from app.modules.apply.wizard import (
    INDIVIDUAL_APPLY_PATH,
    GroupApplyWizard,
    IndividualApplyWizard,
    payment_method_or_default,
)
from app.modules.catalog.repository import CatalogRepository
from app.modules.catalog.schemas import CourseRead
from app.modules.enrollment.schemas import INDIVIDUAL_ENROLLMENT_TYPE, EnrollmentRequest
from app.modules.enrollment.service import validate_individual_request
from app.modules.timetable.service import individual_period_grid
from app.shared.exceptions import NotFoundException

logger = logging.getLogger(__name__)

MSG_DRAFT_EXPIRED = "申し込み情報の有効期限が切れました。最初からやり直してください。"


def individual_options() -> IndividualOptionsRead:
    """Choices offered by the individual tutoring wizard."""
    prices = {plan.key: plan.price for plan in INDIVIDUAL_PRICE_PLANS}
    return IndividualOptionsRead(
        subjects=list(SUBJECTS),
        formats=[
            FormatOption(
                value=fmt.value,
                label=COURSE_TYPE_LABELS[fmt],
                companions=companions,
                price=prices[fmt.value],
            )
            for fmt, companions in FORMAT_COMPANIONS.items()
        ],
        payment_methods=[
            LabeledOption(value=method.value, label=label) for method, label in PAYMENT_METHOD_LABELS.items()
        ],
        periods=individual_period_grid(),
    )


class ApplyService:
    """Server side of the application wizards."""

    def __init__(
        self,
        catalog_repository: CatalogRepository,
        draft_store: ApplyDraftStore,
        settings: Settings,
    ) -> None:
        self.catalog_repository = catalog_repository
        self.draft_store = draft_store
        self.settings = settings

    def _login_url(self, next_path: str) -> str:
        return f"{self.settings.api_prefix}/auth/login?next={quote(next_path, safe='')}"

    async def create_individual_draft(self, payload: IndividualDraftRequest) -> DraftCreatedRead:
        """Validate the wizard state and park it until the user signs in."""
        request = EnrollmentRequest(
            type=INDIVIDUAL_ENROLLMENT_TYPE,
            slots=payload.slots,
            subjects=payload.subjects,
            format=payload.format,
            friend_names=payload.friend_names,
            payment_method=payload.payment_method,
        )
        slots, subjects, fmt, friend_names, payment_method = validate_individual_request(request)
        wizard = IndividualApplyWizard(
            slots=slots,
            subjects=subjects,
            format=fmt,
            friend_names=friend_names,
            payment_method=payment_method,
        )
        draft_id = await self.draft_store.save(wizard.snapshot())
        logger.info("Parked individual apply draft %s", draft_id)
        next_path = f"{INDIVIDUAL_APPLY_PATH}?{urlencode({'restore': 'true', 'draft': draft_id})}"
        return DraftCreatedRead(draft_id=draft_id, login_url=self._login_url(next_path))

    async def restore_individual_draft(self, draft_id: str) -> IndividualDraftRead:
        snapshot = await self.draft_store.pop(draft_id)
        if snapshot is None:
            raise NotFoundException(MSG_DRAFT_EXPIRED)
        wizard = IndividualApplyWizard.restore(snapshot)
        return IndividualDraftRead(
            step=wizard.step.value,
            slots=wizard.slots,
            slots_query=wizard.slots_query(),
            subjects=wizard.subjects,
            format=wizard.format.value,
            friend_names=wizard.companion_names,
            payment_method=wizard.payment_method.value,
        )

    async def preview_group(self, payload: GroupPreviewRequest, *, authenticated: bool) -> GroupPreviewRead:
        """Reconcile a group selection against current course availability."""
        wizard = GroupApplyWizard(
            course_ids=[normalize_course_id(course_id) for course_id in payload.course_ids],
            payment_method=payment_method_or_default(payload.payment_method),
        )
        lookup_ids = [UUID(course_id) for course_id in wizard.course_ids if is_uuid(course_id)]
        courses = await self.catalog_repository.get_courses_by_ids(lookup_ids)
        removed = wizard.reconcile(courses)
        if removed:
            logger.info("Dropped %d unavailable course(s) from selection", len(removed))

        by_id = {str(course.id): course for course in courses}
        kept = [CourseRead.model_validate(by_id[course_id]) for course_id in wizard.course_ids]

        if wizard.can_proceed():
            transition = wizard.advance(authenticated=authenticated)
            next_path = transition.login_redirect or transition.path
        else:
            next_path = wizard.path

        return GroupPreviewRead(
            courses=kept,
            removed_course_ids=removed,
            total_price=sum(course.price for course in kept),
            payment_method=wizard.payment_method.value,
            next_path=next_path,
        )


def is_uuid(value: str) -> bool:
    try:
        UUID(value)
    except ValueError:
        return False
    return True


def normalize_course_id(value: str) -> str:
    """Canonical UUID text; anything else is kept as sent and later dropped."""
    return str(UUID(value)) if is_uuid(value) else value


async def get_apply_service(session: AsyncSession = Depends(get_db_session)) -> ApplyService:
    """Dependency provider for apply service."""
    settings = get_settings()
    return ApplyService(
        catalog_repository=CatalogRepository(session),
        draft_store=ApplyDraftStore(get_cache_backend(), settings.apply_draft_ttl_seconds),
        settings=settings,
    )
