# bouncer_relay/api/__init__.py
"""API routes package."""

from .routes_bouncer import build_router, verify_handshake, Translator, ROUTE_PREFIX

__all__ = [
    "build_router",
    "verify_handshake",
    "Translator",
    "ROUTE_PREFIX",
]
