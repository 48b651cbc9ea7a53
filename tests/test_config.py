import pytest

from datetime import timedelta

from pydantic import ValidationError

from security.config import SecuritySettings


def test_from_env_reads_the_three_secrets(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "access")
    monkeypatch.setenv("JWT_REFRESH_SECRET", "refresh")
    monkeypatch.setenv("PEPPER", "pepper")

    settings = SecuritySettings.from_env()

    assert settings.access_token_secret.get_secret_value() == "access"
    assert settings.refresh_token_secret.get_secret_value() == "refresh"
    assert settings.password_pepper.get_secret_value() == "pepper"
    assert settings.access_token_ttl == timedelta(minutes=10)
    assert settings.refresh_token_ttl == timedelta(days=30)
    assert settings.password_hash_rounds == 10


def test_missing_secret_fails_construction(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "access")
    monkeypatch.setenv("JWT_REFRESH_SECRET", "refresh")
    monkeypatch.delenv("PEPPER", raising=False)

    with pytest.raises(ValidationError):
        SecuritySettings.from_env()


def test_identical_access_and_refresh_secrets_are_refused():
    with pytest.raises(ValidationError):
        SecuritySettings(
            access_token_secret="same",
            refresh_token_secret="same",
            password_pepper="pepper",
        )


def test_settings_are_immutable(settings):
    with pytest.raises(ValidationError):
        settings.password_pepper = "changed"


def test_secrets_are_masked_in_repr(settings):
    assert "test-pepper" not in repr(settings)
