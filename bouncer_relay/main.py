# bouncer_relay/main.py
"""
Bouncer relay - standalone application

Hosts the bouncer endpoints on their own FastAPI app. Platforms embedding
the relay use BouncerPlugin directly instead.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from . import __version__
from .api import Translator
from .logging import configure_logging, get_logger
from .plugin import BouncerPlugin
from .settings import Settings, settings as default_settings, warn_if_incomplete

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    translator: Optional[Translator] = None,
    plugin: Optional[BouncerPlugin] = None,
) -> FastAPI:
    """Build the relay app around a plugin instance."""
    settings = settings or default_settings
    plugin = plugin or BouncerPlugin(settings, translator)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging(level=settings.log_level, json_output=settings.log_json, force=True)
        warn_if_incomplete(settings)
        logger.info("relay_started", version=__version__)

        yield

        await plugin.aclose()
        logger.info("relay_stopped")

    app = FastAPI(
        title="Bouncer Relay",
        description="Forwards new comments and first flags to the bouncer webhook.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.plugin = plugin

    plugin.router(app)

    @app.get("/health")
    async def health_check():
        """Basic health check."""
        return {
            "status": "ok",
            "service": "bouncer-relay",
            "endpoints_enabled": settings.endpoints_enabled,
            "delivery_enabled": settings.delivery_enabled,
        }

    return app


def run():
    """Run the server (entry point for CLI)."""
    import uvicorn
    uvicorn.run(
        "bouncer_relay.main:create_app",
        factory=True,
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
    )


if __name__ == "__main__":
    run()
