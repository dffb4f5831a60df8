"""Identity API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import RedirectResponse

from app.core.config import get_settings
from app.modules.identity.models import Profile
from app.modules.identity.schemas import ProfileRead
from app.modules.identity.service import (
    IdentityService,
    get_current_user,
    get_identity_service,
    resolve_redirect_base,
)

router = APIRouter(prefix="/auth", tags=["identity"])


def _clear_session(response: Response) -> None:
    response.delete_cookie(get_settings().session_cookie_name, path="/")


@router.get("/login", include_in_schema=False)
async def login(
    request: Request,
    next: str | None = Query(default=None),
    service: IdentityService = Depends(get_identity_service),
) -> RedirectResponse:
    """Send the browser to the identity provider."""
    redirect_base = resolve_redirect_base(request, get_settings())
    return RedirectResponse(service.build_login_url(redirect_base, next), status_code=status.HTTP_302_FOUND)


@router.get("/callback", include_in_schema=False)
async def oauth_callback(
    request: Request,
    code: str | None = Query(default=None),
    state: str | None = Query(default=None),
    next: str | None = Query(default=None),
    service: IdentityService = Depends(get_identity_service),
) -> RedirectResponse:
    """Finish sign-in, set the session cookie and redirect to `next`."""
    settings = get_settings()
    redirect_base = resolve_redirect_base(request, settings)
    next_path = service.resolve_next_path(state, next)
    outcome = await service.complete_login(code, redirect_base, next_path)

    response = RedirectResponse(f"{redirect_base}{outcome.redirect_path}", status_code=status.HTTP_302_FOUND)
    if outcome.session_token is None:
        _clear_session(response)
        return response

    response.set_cookie(
        settings.session_cookie_name,
        outcome.session_token,
        max_age=settings.session_expire_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )
    return response


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout() -> Response:
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    _clear_session(response)
    return response


@router.get("/me", response_model=ProfileRead)
async def get_me(current_user: Profile = Depends(get_current_user)) -> ProfileRead:
    """Return profile of the signed-in user."""
    return ProfileRead.model_validate(current_user)
