"""
Alert models and formatters for the alerting system.
"""
import html
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from decision_engine.models.prediction import PredictionResult, Recommendation
from decision_engine.models.signal import WebhookSignal, SignalAction


class AlertPriority(Enum):
    """Alert priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertType(Enum):
    """Types of alerts."""
    PREDICTION = "prediction"
    SIGNAL = "signal"
    STATUS = "status"


@dataclass
class Alert:
    """Structured alert handed to the notification channels."""
    type: AlertType
    title: str
    body: str
    priority: AlertPriority = AlertPriority.MEDIUM
    data: dict = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def priority_emoji(self) -> str:
        """Get emoji for priority level."""
        return {
            AlertPriority.LOW: "ℹ️",
            AlertPriority.MEDIUM: "📊",
            AlertPriority.HIGH: "⚠️",
            AlertPriority.CRITICAL: "🚨",
        }.get(self.priority, "📢")

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "title": self.title,
            "body": self.body,
            "priority": self.priority.value,
            "data": self.data,
            "created_at": self.created_at.isoformat(),
        }


class AlertFormatter:
    """Build alerts from engine decisions and format them for channels."""

    @staticmethod
    def prediction_alert(result: PredictionResult) -> Alert:
        """Alert for an actionable prediction."""
        emoji = {
            Recommendation.STRONG_BUY: "💚",
            Recommendation.BUY: "💚",
            Recommendation.SELL: "❤️",
            Recommendation.STRONG_SELL: "❤️",
        }.get(result.recommendation, "💛")

        if result.recommendation in (Recommendation.STRONG_BUY, Recommendation.STRONG_SELL):
            priority = AlertPriority.HIGH
        else:
            priority = AlertPriority.MEDIUM

        f = result.factors
        body = "\n".join([
            f"Recommendation: {result.recommendation.value.upper()}",
            f"Direction: {result.direction.value}",
            f"Confidence: {result.confidence * 100:.1f}%",
            f"Risk: {result.risk_level.value}",
            f"Target: ${result.target_price:,.2f} ({result.time_horizon.value})",
            f"Factors: technical {f.technical:.2f}, momentum {f.momentum:.2f}, "
            f"volume {f.volume:.2f}, sentiment {f.sentiment:.2f}",
        ])

        return Alert(
            type=AlertType.PREDICTION,
            title=f"{emoji} AI Signal: {result.symbol}",
            body=body,
            priority=priority,
            data={"prediction_id": result.id, "symbol": result.symbol},
        )

    @staticmethod
    def signal_alert(signal: WebhookSignal) -> Alert:
        """Alert for an accepted inbound signal."""
        emoji = {
            SignalAction.BUY: "💚",
            SignalAction.SELL: "❤️",
        }.get(signal.action, "💛")

        lines = [
            f"Action: {signal.action.value.upper()}",
            f"Source: {signal.source.value}",
            f"Confidence: {signal.confidence * 100:.1f}%",
        ]
        if signal.price is not None:
            lines.append(f"Price: ${signal.price:,.2f}")
        if signal.quantity is not None:
            lines.append(f"Quantity: {signal.quantity}")

        return Alert(
            type=AlertType.SIGNAL,
            title=f"{emoji} Webhook Signal: {signal.symbol}",
            body="\n".join(lines),
            priority=AlertPriority.MEDIUM,
            data={"signal_id": signal.id, "symbol": signal.symbol},
        )

    @staticmethod
    def format_telegram(alert: Alert, now: Optional[datetime] = None) -> str:
        """Format alert as Telegram HTML."""
        timestamp = (now or alert.created_at).strftime("%Y-%m-%d %H:%M:%S UTC")
        return (
            f"{alert.priority_emoji} <b>{html.escape(alert.title)}</b>\n\n"
            f"{html.escape(alert.body)}\n\n"
            f"⏰ <i>{timestamp}</i>"
        )
