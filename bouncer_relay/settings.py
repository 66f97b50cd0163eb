# bouncer_relay/settings.py
"""
Relay settings.

Read once from the environment at process start and passed explicitly to
the dispatcher, the hooks and the router.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

# Load .env file
from dotenv import load_dotenv
load_dotenv()

from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_DELIVERY_TIMEOUT = 10.0


def _non_empty(value: Optional[str]) -> Optional[str]:
    """Treat empty strings the same as missing values."""
    if value is None or value == "":
        return None
    return value


def _timeout(value: Optional[str]) -> float:
    """Parse the delivery timeout, falling back to the default when unusable."""
    value = _non_empty(value)
    if value is None:
        return DEFAULT_DELIVERY_TIMEOUT

    try:
        seconds = float(value)
    except ValueError:
        seconds = 0.0

    if not seconds > 0:
        logger.warning(
            "bouncer_timeout_invalid",
            value=value,
            default_seconds=DEFAULT_DELIVERY_TIMEOUT,
        )
        return DEFAULT_DELIVERY_TIMEOUT
    return seconds


@dataclass(frozen=True)
class Settings:
    """Relay configuration."""

    # Bouncer integration
    ingestion_url: Optional[str] = None
    handshake_token: Optional[str] = None
    auth_token: Optional[str] = None

    # Outbound delivery
    delivery_timeout_seconds: float = DEFAULT_DELIVERY_TIMEOUT

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            ingestion_url=_non_empty(env.get("TALK_SLACK_BOUNCER_URL")),
            handshake_token=_non_empty(env.get("TALK_SLACK_BOUNCER_HANDSHAKE_TOKEN")),
            auth_token=_non_empty(env.get("TALK_SLACK_BOUNCER_AUTH_TOKEN")),
            delivery_timeout_seconds=_timeout(env.get("TALK_SLACK_BOUNCER_TIMEOUT")),
            log_level=_non_empty(env.get("LOG_LEVEL")) or "INFO",
            log_json=env.get("LOG_JSON", "true").lower() != "false",
        )

    @property
    def endpoints_enabled(self) -> bool:
        """Handshake endpoints exist only when URL and handshake token are set."""
        return bool(self.ingestion_url and self.handshake_token)

    @property
    def delivery_enabled(self) -> bool:
        """Deliveries additionally need the auth token."""
        return self.endpoints_enabled and bool(self.auth_token)


def warn_if_incomplete(settings: Settings) -> None:
    """Log the startup warnings for a partially configured relay."""
    if not settings.endpoints_enabled:
        logger.warning(
            "bouncer_disabled",
            reason="TALK_SLACK_BOUNCER_URL and TALK_SLACK_BOUNCER_HANDSHAKE_TOKEN are required",
        )

    if not settings.auth_token:
        logger.warning(
            "bouncer_delivery_disabled",
            reason="comments are not sent unless TALK_SLACK_BOUNCER_AUTH_TOKEN is provided",
        )


# Global settings instance
settings = Settings.from_env()
