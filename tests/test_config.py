"""Tests for core/config.py."""

import pytest
from pydantic import ValidationError

from bizbuilder.core.config import DEFAULT_PLAN_ID, Settings


def test_default_settings():
    s = Settings(_env_file=None)
    assert s.app_port == 5000
    assert s.app_host == "0.0.0.0"
    assert s.log_level == "INFO"
    assert s.access_token_expire_hours == 24
    assert s.refresh_token_expire_days == 7
    assert s.default_plan_id == DEFAULT_PLAN_ID
    assert s.database_url  # non-empty


def test_sync_db_url():
    s = Settings(database_url="postgresql+asyncpg://user:pw@localhost/db")
    assert "+asyncpg" not in s.sync_database_url
    assert "postgresql" in s.sync_database_url


def test_is_production():
    assert Settings(app_env="production").is_production is True
    assert Settings(app_env="development").is_production is False


def test_shared_token_secrets_rejected():
    with pytest.raises(ValidationError):
        Settings(access_token_secret="same-secret", refresh_token_secret="same-secret")


def test_bcrypt_rounds_bounds():
    with pytest.raises(ValidationError):
        Settings(bcrypt_rounds=2)
