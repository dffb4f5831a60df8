"""Identity business logic layer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.database import get_db_session
from app.core.security import (
    OAUTH_STATE_TOKEN_TYPE,
    SESSION_TOKEN_TYPE,
    create_oauth_state,
    create_session_token,
    decode_token,
)
from app.modules.identity.models import Profile
from app.modules.identity.oauth import OAuthClient, OAuthExchangeError
from app.modules.identity.repository import IdentityRepository
from app.shared.exceptions import AuthenticationRequiredException, ForbiddenException
from app.shared.utils import is_safe_redirect_path

logger = logging.getLogger(__name__)

STUDENT_AREA_PREFIX = "/student"
STUDENT_LOGIN_PATH = "/auth/student-login"

bearer_scheme = HTTPBearer(auto_error=False)


def email_in_domain(email: str | None, domain: str) -> bool:
    """True when the address belongs to the allowed domain exactly."""
    if not email:
        return False
    return email.strip().lower().endswith(f"@{domain.lower()}")


def sanitize_next_path(next_path: str | None) -> str:
    return next_path if is_safe_redirect_path(next_path) else "/"


def requires_student_domain(next_path: str) -> bool:
    return next_path.startswith(STUDENT_AREA_PREFIX)


def resolve_redirect_base(request: Request, settings: Settings) -> str:
    """Public origin for redirects; proxies supply X-Forwarded-Host."""
    origin = str(request.base_url).rstrip("/")
    if settings.is_development:
        return origin
    forwarded_host = request.headers.get("x-forwarded-host")
    if forwarded_host:
        return f"https://{forwarded_host.split(',')[0].strip()}"
    return origin


@dataclass(slots=True)
class LoginOutcome:
    """Where to send the browser after the callback, and the session to set."""

    redirect_path: str
    session_token: str | None


class IdentityService:
    """Sign-in via the identity provider and session resolution."""

    def __init__(
        self,
        repository: IdentityRepository,
        oauth_client: OAuthClient,
        settings: Settings,
    ) -> None:
        self.repository = repository
        self.oauth_client = oauth_client
        self.settings = settings

    def build_login_url(self, redirect_base: str, next_path: str | None) -> str:
        """Provider authorize URL; the signed state carries the destination."""
        state = create_oauth_state(sanitize_next_path(next_path))
        return self.oauth_client.build_authorize_url(
            redirect_uri=f"{redirect_base}{self.settings.oauth_redirect_path}",
            state=state,
            hosted_domain=self.settings.student_email_domain,
        )

    def resolve_next_path(self, state: str | None, next_param: str | None) -> str:
        if state:
            try:
                payload = decode_token(state, OAUTH_STATE_TOKEN_TYPE)
            except AuthenticationRequiredException:
                logger.warning("Ignoring invalid OAuth state")
            else:
                return sanitize_next_path(payload.get("next"))
        return sanitize_next_path(next_param)

    async def complete_login(self, code: str | None, redirect_base: str, next_path: str) -> LoginOutcome:
        """Exchange the code, upsert the profile and decide the redirect."""
        if not code:
            return LoginOutcome(f"{STUDENT_LOGIN_PATH}?error=auth_failed", None)

        try:
            identity = await self.oauth_client.exchange_code(
                code,
                redirect_uri=f"{redirect_base}{self.settings.oauth_redirect_path}",
            )
        except OAuthExchangeError as exc:
            logger.warning("OAuth callback failed: %s", exc)
            return LoginOutcome(f"{STUDENT_LOGIN_PATH}?error=auth_failed", None)

        if requires_student_domain(next_path) and not email_in_domain(
            identity.email,
            self.settings.student_email_domain,
        ):
            logger.info("Rejected sign-in outside student domain: %s", identity.email)
            return LoginOutcome(f"{STUDENT_LOGIN_PATH}?error=invalid_domain", None)

        profile = await self.repository.get_profile_by_email(identity.email)
        if profile is None:
            profile = await self.repository.create_profile(
                email=identity.email,
                display_name=identity.name,
                avatar_url=identity.picture,
            )
            logger.info("Created profile %s", profile.id)
        elif identity.picture and profile.avatar_url != identity.picture:
            profile.avatar_url = identity.picture
            await self.repository.save(profile)

        return LoginOutcome(next_path, create_session_token(str(profile.id), profile.email))

    async def get_profile_from_session(self, token: str) -> Profile:
        payload = decode_token(token, SESSION_TOKEN_TYPE)
        subject = payload.get("sub")
        if not subject:
            raise AuthenticationRequiredException("ログインが必要です。")
        try:
            profile_id = UUID(subject)
        except ValueError as exc:
            raise AuthenticationRequiredException("ログインが必要です。") from exc

        profile = await self.repository.get_profile_by_id(profile_id)
        if profile is None:
            raise AuthenticationRequiredException("ログインが必要です。")
        return profile


async def get_identity_service(session: AsyncSession = Depends(get_db_session)) -> IdentityService:
    """Dependency to provide identity service."""
    settings = get_settings()
    return IdentityService(IdentityRepository(session), OAuthClient(settings), settings)


async def get_session_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """Session token from the portal cookie, or a bearer header for API clients."""
    cookie_value = request.cookies.get(get_settings().session_cookie_name)
    if cookie_value:
        return cookie_value
    if credentials is not None:
        return credentials.credentials
    return None


async def get_current_user(
    token: str | None = Depends(get_session_token),
    service: IdentityService = Depends(get_identity_service),
) -> Profile:
    """Resolve currently signed-in profile."""
    if not token:
        raise AuthenticationRequiredException("ログインが必要です。")
    return await service.get_profile_from_session(token)


async def get_current_student(current_user: Profile = Depends(get_current_user)) -> Profile:
    """Signed-in profile restricted to the student email domain."""
    domain = get_settings().student_email_domain
    if not email_in_domain(current_user.email, domain):
        raise ForbiddenException(f"@{domain} のメールアドレスでログインしてください。")
    return current_user


async def get_optional_user(
    token: str | None = Depends(get_session_token),
    service: IdentityService = Depends(get_identity_service),
) -> Profile | None:
    """Signed-in profile when the session is valid, otherwise None."""
    if not token:
        return None
    try:
        return await service.get_profile_from_session(token)
    except AuthenticationRequiredException:
        return None
