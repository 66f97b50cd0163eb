# bouncer_relay/errors.py
"""
Relay error types.

None of these ever reach the host mutation pipeline. Endpoint errors become
an empty 400 response and delivery errors end up in a DeliveryRecord.
"""

from typing import Optional


class RelayError(Exception):
    """Base exception for relay errors."""
    pass


class ValidationFailed(RelayError):
    """Request body does not have the required shape."""
    pass


class HandshakeMismatch(RelayError):
    """Handshake refused: token or URL mismatch, or auth token already set."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Handshake refused: {reason}")


class DeliveryFailure(RelayError):
    """Outbound POST to the bouncer failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
