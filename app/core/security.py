"""Session token signing and verification."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from secrets import token_urlsafe
from typing import Any

from jose import JWTError, jwt

from app.core.config import get_settings
from app.shared.exceptions import AuthenticationRequiredException

SESSION_TOKEN_TYPE = "session"
OAUTH_STATE_TOKEN_TYPE = "oauth_state"
OAUTH_STATE_EXPIRE_MINUTES = 10


def _create_token(subject: str, expires_delta: timedelta, token_type: str, **claims: Any) -> str:
    """Create signed JWT token."""
    settings = get_settings()
    payload: dict[str, Any] = {
        "sub": subject,
        "type": token_type,
        "exp": datetime.now(UTC) + expires_delta,
    }
    payload.update(claims)
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def create_session_token(subject: str, email: str) -> str:
    """Create the session token stored in the portal cookie."""
    expires = timedelta(minutes=get_settings().session_expire_minutes)
    return _create_token(subject=subject, expires_delta=expires, token_type=SESSION_TOKEN_TYPE, email=email)


def create_oauth_state(next_path: str) -> str:
    """Sign the post-login destination so the callback can trust it."""
    return _create_token(
        subject="oauth",
        expires_delta=timedelta(minutes=OAUTH_STATE_EXPIRE_MINUTES),
        token_type=OAUTH_STATE_TOKEN_TYPE,
        next=next_path,
        nonce=token_urlsafe(16),
    )


def decode_token(token: str, expected_type: str) -> dict[str, Any]:
    """Decode and validate JWT token of the expected type."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise AuthenticationRequiredException("ログインが必要です。") from exc
    if payload.get("type") != expected_type:
        raise AuthenticationRequiredException("ログインが必要です。")
    return payload
