"""OAuth2 authorization-code client for the hosted identity provider."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx

from app.core.config import Settings

logger = logging.getLogger(__name__)


class OAuthExchangeError(Exception):
    """Raised when the provider rejects the code or returns unusable data."""


@dataclass(slots=True)
class OAuthIdentity:
    subject: str
    email: str
    name: str
    picture: str | None = None


class OAuthClient:
    """Thin client over the provider's authorize, token and userinfo endpoints."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    def build_authorize_url(self, redirect_uri: str, state: str, hosted_domain: str | None = None) -> str:
        params = {
            "client_id": self.settings.oauth_client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "state": state,
            "prompt": "select_account",
        }
        if hosted_domain:
            params["hd"] = hosted_domain
        return f"{self.settings.oauth_authorize_url}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> OAuthIdentity:
        """Trade an authorization code for the signed-in account's identity."""
        async with httpx.AsyncClient(
            timeout=self.settings.oauth_timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                token_response = await client.post(
                    self.settings.oauth_token_url,
                    data={
                        "grant_type": "authorization_code",
                        "code": code,
                        "redirect_uri": redirect_uri,
                        "client_id": self.settings.oauth_client_id,
                        "client_secret": self.settings.oauth_client_secret,
                    },
                    headers={"Accept": "application/json"},
                )
            except httpx.HTTPError as exc:
                raise OAuthExchangeError(f"Token endpoint unreachable: {exc}") from exc

            if token_response.status_code != 200:
                logger.warning(
                    "OAuth token exchange failed status=%s body=%s",
                    token_response.status_code,
                    token_response.text[:200],
                )
                raise OAuthExchangeError("Token exchange was rejected")

            access_token = token_response.json().get("access_token")
            if not access_token:
                raise OAuthExchangeError("Token response has no access_token")

            try:
                userinfo_response = await client.get(
                    self.settings.oauth_userinfo_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
            except httpx.HTTPError as exc:
                raise OAuthExchangeError(f"Userinfo endpoint unreachable: {exc}") from exc

        if userinfo_response.status_code != 200:
            raise OAuthExchangeError(f"Userinfo request failed with {userinfo_response.status_code}")

        userinfo = userinfo_response.json()
        email = str(userinfo.get("email") or "").strip().lower()
        if not email:
            raise OAuthExchangeError("Provider did not return an email address")
        if userinfo.get("email_verified") is False:
            raise OAuthExchangeError("Provider email address is not verified")

        return OAuthIdentity(
            subject=str(userinfo.get("sub") or email),
            email=email,
            name=str(userinfo.get("name") or ""),
            picture=userinfo.get("picture"),
        )
