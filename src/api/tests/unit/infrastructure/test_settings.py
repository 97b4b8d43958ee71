"""Unit tests for settings validation."""

import pytest
from pydantic import SecretStr, ValidationError

from infrastructure.settings import (
    AuthSettings,
    DatabaseSettings,
    NotificationSettings,
    OutboxSettings,
    SmtpSettings,
)


class TestAuthSettings:
    def test_requires_secret_or_issuer(self, monkeypatch):
        monkeypatch.delenv("SERVMON_AUTH_JWT_SECRET", raising=False)
        monkeypatch.delenv("SERVMON_AUTH_ISSUER_URL", raising=False)

        with pytest.raises(ValidationError):
            AuthSettings(_env_file=None)

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("SERVMON_AUTH_JWT_SECRET", "s3cret")

        settings = AuthSettings(_env_file=None)

        assert settings.jwt_secret.get_secret_value() == "s3cret"
        assert settings.algorithm == "HS256"


class TestNotificationSettings:
    def test_defaults(self):
        settings = NotificationSettings(_env_file=None)

        assert settings.timezone == "Europe/Paris"
        assert settings.timestamp_format == "%d/%m/%Y %H:%M:%S"

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError):
            NotificationSettings(_env_file=None, timezone="Mars/Olympus")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            NotificationSettings(_env_file=None, delivery_timeout_seconds=0)


class TestSmtpSettings:
    def test_incomplete_without_password(self):
        settings = SmtpSettings(
            _env_file=None, host="smtp.example.com", port=587, username="u"
        )

        assert not settings.is_complete

    def test_port_465_uses_implicit_tls(self):
        settings = SmtpSettings(
            _env_file=None,
            host="smtp.example.com",
            port=465,
            username="u",
            password=SecretStr("p"),
        )

        assert settings.is_complete
        assert settings.use_implicit_tls


def test_database_connection_string_omits_password():
    settings = DatabaseSettings(_env_file=None, password=SecretStr("hidden"))

    assert "hidden" not in settings.connection_string


def test_outbox_batch_size_bounded():
    with pytest.raises(ValidationError):
        OutboxSettings(_env_file=None, batch_size=0)
