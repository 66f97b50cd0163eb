# bouncer_relay/webhooks/executor.py
"""
Bouncer executor - POSTs a notification to the configured bouncer URL.

One attempt per notification. Failures are logged and recorded, never raised
and never retried.
"""

from collections import deque
from datetime import datetime, timezone
from typing import Deque, Dict, List, Optional

import httpx

from .. import RELAY_NAME, __version__
from ..errors import DeliveryFailure
from ..logging import get_logger
from ..models import DeliveryRecord, NotificationPayload
from ..settings import Settings

logger = get_logger(__name__)

# Recent attempts kept for diagnostics
DELIVERY_LOG_SIZE = 100


class BouncerExecutor:
    """
    Delivers notification payloads to the bouncer.

    The client is created lazily inside the running event loop so the
    executor can be built at import time by a synchronous host.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.timeout = settings.delivery_timeout_seconds
        self._client = client
        self._transport = transport
        self._log: Deque[DeliveryRecord] = deque(maxlen=DELIVERY_LOG_SIZE)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def build_headers(self) -> Dict[str, str]:
        """Headers sent with every delivery."""
        return {
            "X-Handshake-Token": self.settings.handshake_token or "",
            "Content-Type": "application/json",
            "User-Agent": f"{RELAY_NAME}/{__version__}",
            "Authorization": self.settings.auth_token or "",
        }

    async def deliver(self, payload: NotificationPayload) -> DeliveryRecord:
        """
        Deliver one payload.

        Args:
            payload: Notification to send

        Returns:
            Delivery record (success or failure)
        """
        url = self.settings.ingestion_url
        body = payload.to_dict()
        source = payload.source.value if payload.source else None

        logger.debug("bouncer_delivery_attempt", comment_id=payload.id, source=source)

        try:
            response = await self.client.post(url, json=body, headers=self.build_headers())

            if not 200 <= response.status_code < 300:
                raise DeliveryFailure(
                    f"HTTP {response.status_code}", status_code=response.status_code
                )

            logger.debug(
                "bouncer_delivery_complete",
                comment_id=payload.id,
                source=source,
                status_code=response.status_code,
            )
            return self._record(body, url, response.status_code, None)

        except DeliveryFailure as e:
            logger.warning(
                "bouncer_delivery_rejected",
                comment_id=payload.id,
                source=source,
                status_code=e.status_code,
            )
            return self._record(body, url, e.status_code, str(e))

        except httpx.TimeoutException as e:
            logger.warning(
                "bouncer_delivery_timeout",
                comment_id=payload.id,
                source=source,
                timeout_seconds=self.timeout,
                error=str(e),
            )
            return self._record(body, url, None, f"Timeout: {e}")

        except httpx.HTTPError as e:
            logger.warning(
                "bouncer_delivery_failed",
                comment_id=payload.id,
                source=source,
                error=str(e),
            )
            return self._record(body, url, None, str(e) or type(e).__name__)

    def _record(
        self,
        body: Dict,
        url: str,
        status: Optional[int],
        error: Optional[str],
    ) -> DeliveryRecord:
        record = DeliveryRecord(
            payload=body,
            url=url,
            response_status=status,
            success=error is None,
            error=error,
            delivered_at=datetime.now(timezone.utc),
        )
        self._log.append(record)
        return record

    def recent_deliveries(self, limit: int = 50) -> List[DeliveryRecord]:
        """Most recent delivery attempts, newest first."""
        return list(reversed(self._log))[:limit]

    async def aclose(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
