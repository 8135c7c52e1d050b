"""
Notification dispatcher - orchestrates alert sending across channels.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Optional, Set
from dataclasses import dataclass

from decision_engine.models.prediction import PredictionResult
from decision_engine.models.signal import WebhookSignal
from .formatters import Alert, AlertFormatter
from .telegram import TelegramClient, TelegramConfig
from .webhook import WebhookNotifier, WebhookConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationConfig:
    """Configuration for NotificationDispatcher, passed in by the caller."""
    telegram: Optional[TelegramConfig] = None
    webhook: Optional[WebhookConfig] = None
    # Predictions below this confidence are not announced
    min_confidence: float = 0.5
    log_alerts: bool = True


class NotificationDispatcher:
    """
    Central dispatcher for all alerts.

    Handles:
    - Deciding whether a decision is worth announcing
    - Sending to the configured channels
    - Tracking what was sent

    Every public coroutine is best-effort: channel failures are logged and
    reported through the return value, never raised.
    """

    def __init__(
        self,
        config: NotificationConfig,
        telegram: Optional[TelegramClient] = None,
        webhook: Optional[WebhookNotifier] = None,
    ):
        self.config = config

        # Initialize clients
        self.telegram = telegram or (TelegramClient(config.telegram) if config.telegram else None)
        self.webhook = webhook or (WebhookNotifier(config.webhook) if config.webhook else None)

        # Tracking
        self.sent_alerts: list = []
        self.failed_count = 0

        logger.info("NotificationDispatcher initialized")

    async def dispatch(self, alert: Alert) -> bool:
        """
        Send an alert through configured channels.

        Args:
            alert: Alert to send

        Returns:
            True if sent to at least one channel
        """
        sent_to = []

        if self.telegram and self.telegram.is_available:
            try:
                if await self.telegram.send_message(AlertFormatter.format_telegram(alert)):
                    sent_to.append("telegram")
            except Exception as e:
                logger.warning(f"Error sending alert to telegram: {e}")

        if self.webhook and self.webhook.is_available:
            try:
                if await self.webhook.send(alert.to_dict()):
                    sent_to.append("webhook")
            except Exception as e:
                logger.warning(f"Error sending alert to webhook: {e}")

        if not sent_to:
            self.failed_count += 1
            logger.debug(f"Alert not delivered to any channel: {alert.title}")
            return False

        if self.config.log_alerts:
            self.sent_alerts.append({
                "type": alert.type.value,
                "priority": alert.priority.value,
                "title": alert.title,
                "sent_at": datetime.now(timezone.utc).isoformat(),
                "channels": sent_to,
            })
        return True

    def should_notify(self, result: PredictionResult) -> bool:
        """A prediction is announced when it is actionable and confident enough."""
        return (
            result.recommendation.is_actionable
            and result.confidence >= self.config.min_confidence
        )

    async def on_prediction(self, result: PredictionResult) -> bool:
        """
        Handle a new prediction.

        Returns:
            True if an alert was delivered
        """
        if not self.should_notify(result):
            return False
        return await self.dispatch(AlertFormatter.prediction_alert(result))

    async def on_signal(self, signal: WebhookSignal) -> bool:
        """Handle an accepted inbound signal."""
        return await self.dispatch(AlertFormatter.signal_alert(signal))

    def get_stats(self) -> dict:
        """Get alerting statistics."""
        return {
            "alerts_sent": len(self.sent_alerts),
            "alerts_failed": self.failed_count,
            "recent_alerts": self.sent_alerts[-10:],
            "telegram_available": self.telegram.is_available if self.telegram else False,
            "webhook_available": self.webhook.is_available if self.webhook else False,
        }

    async def test_channels(self) -> dict:
        """Test all configured channels."""
        results = {}

        if self.telegram:
            results["telegram"] = await self.telegram.test_connection()
        else:
            results["telegram"] = {"success": False, "error": "Not configured"}

        if self.webhook:
            ok = await self.webhook.send({"type": "status", "title": "Connection test"})
            results["webhook"] = {"success": ok}
        else:
            results["webhook"] = {"success": False, "error": "Not configured"}

        return results


class NotificationTasks:
    """
    Runs notification coroutines in the background.

    Keeps a reference to every in-flight task until it finishes and logs
    failures from a done-callback, so callers never wait on channel I/O.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, notification: Awaitable, label: str) -> asyncio.Task:
        task = asyncio.ensure_future(notification)
        task.set_name(f"notify:{label}")
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task):
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Notification {task.get_name()} failed: {error}")

    async def drain(self):
        """Wait for every in-flight notification to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
