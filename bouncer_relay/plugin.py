# bouncer_relay/plugin.py
"""
Host-facing plugin object.

The host registers `plugin.hooks` with its mutation pipeline and calls
`plugin.router(app)` while building its HTTP app.
"""

from typing import Optional

from fastapi import FastAPI

from .api import Translator, build_router
from .hooks import BouncerHooks
from .logging import get_logger
from .settings import Settings
from .webhooks import BouncerDispatcher, BouncerExecutor

logger = get_logger(__name__)


class BouncerPlugin:
    """Wires settings, delivery and hooks together."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        translator: Optional[Translator] = None,
        executor: Optional[BouncerExecutor] = None,
    ):
        self.settings = settings or Settings.from_env()
        self.translator = translator
        self.executor = executor or BouncerExecutor(self.settings)
        self.dispatcher = BouncerDispatcher(self.executor)
        self.event_hooks = BouncerHooks(self.settings, self.dispatcher)

    @property
    def hooks(self):
        return self.event_hooks.registry

    def router(self, app: FastAPI) -> bool:
        """Mount the bouncer endpoints. Returns False when they are disabled."""
        router = build_router(self.settings, self.translator)
        if router is None:
            return False
        app.include_router(router)
        logger.info("bouncer_routes_mounted", prefix=router.prefix)
        return True

    async def aclose(self):
        """Let in-flight deliveries finish, then close the client."""
        await self.dispatcher.drain()
        await self.executor.aclose()
