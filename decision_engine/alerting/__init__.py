"""
Alerting system for the decision engine.

Provides Telegram and outbound webhook alerts for predictions and signals.
"""
from .formatters import (
    Alert,
    AlertType,
    AlertPriority,
    AlertFormatter,
)
from .telegram import TelegramClient, TelegramConfig
from .webhook import WebhookNotifier, WebhookConfig
from .manager import NotificationDispatcher, NotificationConfig, NotificationTasks

__all__ = [
    # Models
    "Alert",
    "AlertType",
    "AlertPriority",
    "AlertFormatter",

    # Telegram
    "TelegramClient",
    "TelegramConfig",

    # Webhook
    "WebhookNotifier",
    "WebhookConfig",

    # Dispatcher
    "NotificationDispatcher",
    "NotificationConfig",
    "NotificationTasks",
]
