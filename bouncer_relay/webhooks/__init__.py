# bouncer_relay/webhooks/__init__.py
"""
Outbound notifications to the bouncer.

Delivers a comment or flag notification with a single best-effort HTTP POST.
"""

from .executor import BouncerExecutor
from .dispatcher import BouncerDispatcher

__all__ = ["BouncerExecutor", "BouncerDispatcher"]
