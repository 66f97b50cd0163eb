# bouncer_relay/api/routes_bouncer.py
"""
Bouncer API routes.

POST /api/slack-bouncer/test       Handshake test used by the bouncer operator
POST /api/slack-bouncer/translate  Localized strings for the bouncer UI

Every rejection is an empty 400 so the caller cannot tell which check failed.
"""

import hmac
from typing import Optional, Protocol

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from .. import __version__
from ..errors import HandshakeMismatch, ValidationFailed
from ..logging import get_logger
from ..models import HandshakeRequest, HandshakeResponse, TranslateRequest
from ..settings import Settings
from .deps import require_roles
from .negotiation import negotiate

logger = get_logger(__name__)

ROUTE_PREFIX = "/api/slack-bouncer"

# Roles allowed to run the handshake and use translations
ALLOWED_ROLES = ("ADMIN", "MODERATOR")

TRANSLATION_MEDIA_TYPES = ("text/plain", "application/json")


class Translator(Protocol):
    """Host translation lookup."""

    def translate(self, key: str, *replacements: str) -> str:
        ...


def _same(submitted: str, configured: Optional[str]) -> bool:
    if configured is None:
        return False
    return hmac.compare_digest(submitted.encode("utf-8"), configured.encode("utf-8"))


def verify_handshake(settings: Settings, request: HandshakeRequest) -> HandshakeResponse:
    """
    Check a handshake against the configured secret and URL.

    Raises:
        HandshakeMismatch: Auth token already configured, or token/URL differ
    """
    # An installation that already has its auth token does not need the test
    if settings.auth_token:
        raise HandshakeMismatch("auth_token_configured")

    if not _same(request.handshake_token, settings.handshake_token):
        raise HandshakeMismatch("handshake_token")

    if request.injestion_url != settings.ingestion_url:
        raise HandshakeMismatch("injestion_url")

    return HandshakeResponse(challenge=request.challenge, client_version=__version__)


async def _validated(request: Request, model):
    """Parse the JSON body into a strict model or raise ValidationFailed."""
    try:
        body = await request.json()
        return model.model_validate(body)
    except ValueError as e:
        # Covers malformed JSON and pydantic ValidationError
        raise ValidationFailed(str(e)) from e


def build_router(settings: Settings, translator: Optional[Translator] = None) -> Optional[APIRouter]:
    """
    Build the bouncer router.

    Returns None when the ingestion URL or handshake token is missing, in
    which case no endpoint is registered at all.
    """
    if not settings.endpoints_enabled:
        return None

    router = APIRouter(prefix=ROUTE_PREFIX, tags=["bouncer"])
    authorized = Depends(require_roles(*ALLOWED_ROLES))

    @router.post("/test", dependencies=[authorized])
    async def handshake_test(request: Request) -> Response:
        """
        Verify the relay is configured for the bouncer.

        Responds 202 with the echoed challenge and the relay version when
        the handshake token and ingestion URL both match.
        """
        try:
            handshake = await _validated(request, HandshakeRequest)
            response = verify_handshake(settings, handshake)
        except ValidationFailed:
            logger.info("handshake_rejected", reason="invalid_body")
            return Response(status_code=400)
        except HandshakeMismatch as e:
            logger.info("handshake_rejected", reason=e.reason)
            return Response(status_code=400)

        logger.info("handshake_matched")
        return JSONResponse(status_code=202, content=response.model_dump())

    if translator is not None:

        @router.post("/translate", dependencies=[authorized])
        async def translate(request: Request) -> Response:
            """Resolve a translation key as plain text or JSON."""
            try:
                body = await _validated(request, TranslateRequest)
            except ValidationFailed:
                return Response(status_code=400)

            media_type = negotiate(request.headers.get("accept"), TRANSLATION_MEDIA_TYPES)
            if media_type is None:
                return Response(status_code=406)

            try:
                translation = translator.translate(body.key, *(body.replacements or []))
            except LookupError:
                logger.info("translation_missing", key=body.key)
                return Response(status_code=404)
            except Exception as e:
                logger.exception("translation_failed", key=body.key, error=str(e))
                return Response(status_code=500)

            if media_type == "text/plain":
                return PlainTextResponse(translation)
            return JSONResponse({"translation": translation})

    return router
