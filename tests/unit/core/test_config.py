"""
Unit Tests for Configuration
"""

import logging

import pytest

from teamdesk.core.config import (
    AuthConfig,
    LoggingConfig,
    MembershipConfig,
    StoreConfig,
    TeamdeskConfig,
    reload_settings,
    setup_logging,
)
from teamdesk.core.errors import ValidationError
from teamdesk.core.validation import emails_match, normalize_email

pytestmark = [pytest.mark.unit]


class TestConfigFromEnv:
    """Tests for environment-driven configuration"""

    def test_defaults(self, monkeypatch):
        for name in ("DOCUMENT_STORE_BACKEND", "BCRYPT_ROUNDS", "ACTIVITY_LOG_ENABLED"):
            monkeypatch.delenv(name, raising=False)

        config = TeamdeskConfig.from_env()

        assert config.store.backend == "memory"
        assert config.auth.bcrypt_rounds == 12
        assert config.membership.activity_log_enabled is True
        assert config.membership.offer_all_pending_invitations is True

    def test_store_config(self, monkeypatch):
        monkeypatch.setenv("DOCUMENT_STORE_BACKEND", "postgres")
        monkeypatch.setenv("POSTGRES_PORT", "6543")
        monkeypatch.setenv("DOCUMENT_STORE_TABLE", "docs")

        config = StoreConfig.from_env()

        assert config.backend == "postgres"
        assert config.postgres_port == 6543
        assert config.table == "docs"

    def test_invalid_integer_falls_back(self, monkeypatch):
        monkeypatch.setenv("BCRYPT_ROUNDS", "lots")

        assert AuthConfig.from_env().bcrypt_rounds == 12

    def test_membership_switches(self, monkeypatch):
        monkeypatch.setenv("ACTIVITY_LOG_ENABLED", "false")
        monkeypatch.setenv("OFFER_ALL_PENDING_INVITATIONS", "FALSE")

        config = MembershipConfig.from_env()

        assert config.activity_log_enabled is False
        assert config.offer_all_pending_invitations is False

    def test_reload_settings(self, monkeypatch):
        monkeypatch.setenv("MIN_PASSWORD_LENGTH", "10")

        settings = reload_settings()

        assert settings.auth.min_password_length == 10
        monkeypatch.delenv("MIN_PASSWORD_LENGTH")
        reload_settings()


class TestEmailNormalization:
    """Tests for normalize_email and emails_match"""

    def test_normalize(self):
        assert normalize_email("  Foo@Bar.COM ") == "foo@bar.com"

    @pytest.mark.parametrize("email", [None, "", "   ", "foo", "foo@bar", "@bar.com", "a b@bar.com"])
    def test_invalid(self, email):
        with pytest.raises(ValidationError):
            normalize_email(email)

    def test_match(self):
        assert emails_match("Foo@Bar.com", "foo@bar.com ")
        assert not emails_match("foo@bar.com", "foo@baz.com")


class TestSetupLogging:
    """Tests for setup_logging"""

    def test_level_and_file_handler(self, monkeypatch, tmp_path):
        captured = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

        setup_logging(LoggingConfig(log_level="warning", log_file=str(tmp_path / "teamdesk.log")))

        assert captured["level"] == logging.WARNING
        assert len(captured["handlers"]) == 2
        for handler in captured["handlers"]:
            handler.close()

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        captured = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

        setup_logging(LoggingConfig(log_level="chatty"))

        assert captured["level"] == logging.INFO
