"""
Outbound webhook notifications.

POSTs alerts as JSON to a configured URL, optionally with a bearer secret.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any

import aiohttp

logger = logging.getLogger(__name__)

NOTIFICATION_SOURCE = "signal-decision-engine"


@dataclass(frozen=True)
class WebhookConfig:
    """Outbound webhook configuration."""
    url: str
    secret: Optional[str] = None
    timeout_seconds: float = 10.0
    enabled: bool = True


class WebhookNotifier:
    """Sends notification payloads to an HTTP endpoint."""

    def __init__(self, config: WebhookConfig, session: Optional[aiohttp.ClientSession] = None):
        self.config = config
        self._session = session

    @property
    def is_available(self) -> bool:
        return self.config.enabled and bool(self.config.url)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.secret:
            headers["Authorization"] = f"Bearer {self.config.secret}"
        return headers

    def build_body(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "source": NOTIFICATION_SOURCE,
            "data": data,
        }

    async def send(self, data: Dict[str, Any]) -> bool:
        """
        POST a notification.

        Returns:
            True on a 2xx response, False otherwise
        """
        if not self.is_available:
            return False

        timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
        owns_session = self._session is None
        session = self._session or aiohttp.ClientSession(timeout=timeout)

        try:
            async with session.post(
                self.config.url,
                json=self.build_body(data),
                headers=self._headers(),
                timeout=timeout,
            ) as response:
                if response.status >= 400:
                    logger.error(f"Webhook failed with status: {response.status}")
                    return False
            logger.debug("Webhook notification sent successfully")
            return True
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to send webhook notification: {e}")
            return False
        finally:
            if owns_session:
                await session.close()

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()
