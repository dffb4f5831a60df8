from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.core.config import Settings

PRODUCTION_OAUTH = {"oauth_client_id": "client-id", "oauth_client_secret": "client-secret"}


def test_default_secret_key_allowed_in_development() -> None:
    settings = Settings(_env_file=None, app_env="development", secret_key="change-me")
    assert settings.secret_key == "change-me"
    assert settings.is_development is True


def test_default_secret_key_rejected_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(
            _env_file=None,
            app_env="production",
            secret_key="change-me",
            session_cookie_secure=True,
            **PRODUCTION_OAUTH,
        )


def test_placeholder_secret_key_prefix_rejected_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(
            _env_file=None,
            app_env="production",
            secret_key="change-me-in-production",
            session_cookie_secure=True,
            **PRODUCTION_OAUTH,
        )


def test_oauth_credentials_required_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="production", secret_key="super-secure-value", session_cookie_secure=True)


def test_insecure_session_cookie_rejected_in_production() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="production", secret_key="super-secure-value", **PRODUCTION_OAUTH)


def test_complete_production_settings_are_accepted() -> None:
    settings = Settings(
        _env_file=None,
        app_env="production",
        secret_key="super-secure-value",
        session_cookie_secure=True,
        **PRODUCTION_OAUTH,
    )
    assert settings.secret_key == "super-secure-value"
    assert settings.is_development is False


def test_student_email_domain_is_normalized() -> None:
    settings = Settings(_env_file=None, student_email_domain=" @Shukutoku.ED.jp ")
    assert settings.student_email_domain == "shukutoku.ed.jp"


def test_trusted_proxy_ips_default_to_loopback() -> None:
    settings = Settings(_env_file=None)
    assert settings.contact_rate_limit_trusted_proxy_ips == ("127.0.0.1", "::1")


def test_trusted_proxy_ips_are_parsed_from_comma_separated_string() -> None:
    settings = Settings(_env_file=None, contact_rate_limit_trusted_proxy_ips=" 10.0.0.1, 10.0.0.2 ,")
    assert settings.contact_rate_limit_trusted_proxy_ips == ("10.0.0.1", "10.0.0.2")


def test_redis_cache_backend_requires_redis_url() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, cache_backend="redis")

    settings = Settings(_env_file=None, cache_backend="redis", redis_url="redis://redis:6379/0")
    assert settings.cache_backend == "redis"
