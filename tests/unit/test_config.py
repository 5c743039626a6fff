import pytest
from pydantic import ValidationError

from officeflow.core.config import Settings


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@localhost/officeflow")
    monkeypatch.setenv("SECRET_KEY", "k" * 32)
    return monkeypatch


def test_defaults(env):
    settings = Settings(_env_file=None)
    assert settings.activity_retention_limit == 500
    assert settings.billing_deletion_grace_hours == 24
    assert settings.notification_max_attempts == 3
    assert settings.smtp_port == 587
    assert settings.smtp_use_tls is True


def test_env_overrides(env):
    env.setenv("ACTIVITY_RETENTION_LIMIT", "50")
    env.setenv("NOTIFICATION_WORKER_ENABLED", "false")
    settings = Settings(_env_file=None)
    assert settings.activity_retention_limit == 50
    assert settings.notification_worker_enabled is False


def test_database_url_required(env):
    env.delenv("DATABASE_URL")
    with pytest.raises(ValidationError, match="DATABASE_URL is required"):
        Settings(_env_file=None)


def test_secret_key_required(env):
    env.setenv("SECRET_KEY", "")
    with pytest.raises(ValidationError, match="SECRET_KEY is required"):
        Settings(_env_file=None)


def test_retention_limit_must_be_positive(env):
    env.setenv("ACTIVITY_RETENTION_LIMIT", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_cors_origins_split_and_trimmed(env):
    env.setenv("ALLOWED_ORIGINS", "https://a.example, ,https://b.example ")
    settings = Settings(_env_file=None)
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
