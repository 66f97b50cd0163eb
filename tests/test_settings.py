# tests/test_settings.py
"""
Test configuration loading.

Partial configuration silently disables parts of the relay.
"""

import logging

import pytest

from bouncer_relay.settings import Settings, warn_if_incomplete


class TestSettingsFromEnv:
    """Tests for reading settings from the environment."""

    def test_all_values_read(self):
        """All three bouncer values come from their variables."""
        settings = Settings.from_env({
            "TALK_SLACK_BOUNCER_URL": "https://bouncer.example.com",
            "TALK_SLACK_BOUNCER_HANDSHAKE_TOKEN": "hs",
            "TALK_SLACK_BOUNCER_AUTH_TOKEN": "auth",
            "TALK_SLACK_BOUNCER_TIMEOUT": "3.5",
        })

        assert settings.ingestion_url == "https://bouncer.example.com"
        assert settings.handshake_token == "hs"
        assert settings.auth_token == "auth"
        assert settings.delivery_timeout_seconds == 3.5
        assert settings.endpoints_enabled
        assert settings.delivery_enabled

    def test_empty_strings_are_missing(self):
        """Empty values count as not configured."""
        settings = Settings.from_env({
            "TALK_SLACK_BOUNCER_URL": "",
            "TALK_SLACK_BOUNCER_HANDSHAKE_TOKEN": "hs",
            "TALK_SLACK_BOUNCER_AUTH_TOKEN": "",
        })

        assert settings.ingestion_url is None
        assert settings.auth_token is None
        assert not settings.endpoints_enabled
        assert not settings.delivery_enabled

    def test_defaults(self):
        """Nothing configured disables everything."""
        settings = Settings.from_env({})

        assert not settings.endpoints_enabled
        assert not settings.delivery_enabled
        assert settings.delivery_timeout_seconds == 10.0
        assert settings.log_json is True

    @pytest.mark.parametrize("value", ["", "soon", "0", "-3", "nan"])
    def test_unusable_timeout_falls_back(self, value):
        """Empty, non-numeric or non-positive timeouts use the default."""
        settings = Settings.from_env({"TALK_SLACK_BOUNCER_TIMEOUT": value})

        assert settings.delivery_timeout_seconds == 10.0

    def test_empty_log_level_defaults(self):
        settings = Settings.from_env({"LOG_LEVEL": ""})

        assert settings.log_level == "INFO"


class TestEnabledModes:
    """Tests for the derived enable flags."""

    def test_missing_auth_token_keeps_endpoints(self):
        """Without the auth token only delivery is disabled."""
        settings = Settings(ingestion_url="https://b", handshake_token="hs")

        assert settings.endpoints_enabled
        assert not settings.delivery_enabled

    def test_missing_handshake_token_disables_all(self):
        """Without the handshake token nothing is enabled, even with an auth token."""
        settings = Settings(ingestion_url="https://b", auth_token="auth")

        assert not settings.endpoints_enabled
        assert not settings.delivery_enabled


class TestStartupWarnings:
    """Tests for the incomplete-configuration warnings."""

    def test_warns_for_each_missing_part(self, caplog):
        """Both warnings are logged when nothing is configured."""
        with caplog.at_level(logging.WARNING, logger="bouncer_relay.settings"):
            warn_if_incomplete(Settings())

        messages = [r.getMessage() for r in caplog.records]
        assert "bouncer_disabled" in messages
        assert "bouncer_delivery_disabled" in messages

    def test_complete_configuration_is_quiet(self, caplog):
        """No warnings when everything is configured."""
        with caplog.at_level(logging.WARNING, logger="bouncer_relay.settings"):
            warn_if_incomplete(Settings(ingestion_url="u", handshake_token="h", auth_token="a"))

        assert caplog.records == []

    def test_invalid_timeout_warns(self, caplog):
        """A timeout that cannot be used is reported, not raised."""
        with caplog.at_level(logging.WARNING, logger="bouncer_relay.settings"):
            Settings.from_env({"TALK_SLACK_BOUNCER_TIMEOUT": "soon"})

        assert [r.getMessage() for r in caplog.records] == ["bouncer_timeout_invalid"]
