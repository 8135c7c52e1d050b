"""
Signal intake pipeline.

Validates externally reported trade suggestions, fills defaults, records
accepted signals and hands them to automated actions.

Rejection happens only in ``normalize``; once a signal is accepted nothing
downstream can turn it back into a failure.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from decision_engine.alerting.manager import NotificationDispatcher, NotificationTasks
from decision_engine.database.recorder import DecisionRecorder, record_safely, WEBHOOK_SIGNAL
from decision_engine.exceptions import ValidationError
from decision_engine.logging import logger as engine_logger
from decision_engine.models.signal import (
    SignalAction,
    SignalSource,
    WebhookSignal,
    new_signal_id,
)
from decision_engine.signals.intake.actions import AutomatedActionForwarder
from decision_engine.signals.intake.tradingview import parse_tradingview_alert

logger = logging.getLogger(__name__)

KNOWN_FIELDS = frozenset({
    "source", "timestamp", "symbol", "action",
    "price", "quantity", "confidence", "metadata",
})


@dataclass
class IntakeResult:
    """Outcome of processing one inbound payload."""
    accepted: bool
    signal: Optional[WebhookSignal] = None
    reason: Optional[str] = None
    recorded: bool = False
    forwarded: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accepted": self.accepted,
            "signal": self.signal.to_record() if self.signal else None,
            "reason": self.reason,
            "recorded": self.recorded,
            "forwarded": self.forwarded,
        }


def _optional_number(payload: Mapping[str, Any], name: str) -> Optional[float]:
    value = payload.get(name)
    if value is None:
        return None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(name, "must be a number")
    if not math.isfinite(value):
        raise ValidationError(name, "must be finite")
    return float(value)


def _parse_timestamp(value: Any) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError("timestamp", f"not an ISO-8601 timestamp: {value!r}")
    else:
        raise ValidationError("timestamp", "must be an ISO-8601 string")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class SignalIntakePipeline:
    """
    Accepts, normalizes, records and forwards inbound signals.

    Args:
        recorder: Decision store for accepted signals (optional)
        forwarder: Automated-action forwarder (optional)
        default_confidence: Confidence assigned when the payload has none
        notifier: Announces accepted signals (optional)
    """

    def __init__(
        self,
        recorder: Optional[DecisionRecorder] = None,
        forwarder: Optional[AutomatedActionForwarder] = None,
        default_confidence: float = 0.7,
        notifier: Optional[NotificationDispatcher] = None,
    ):
        self.recorder = recorder
        self.forwarder = forwarder
        self.notifier = notifier
        self.notifications = NotificationTasks()
        self.default_confidence = default_confidence

        self.accepted_count = 0
        self.rejected_count = 0

    @classmethod
    def from_config(
        cls,
        config,
        recorder: Optional[DecisionRecorder] = None,
        notifier: Optional[NotificationDispatcher] = None,
    ) -> "SignalIntakePipeline":
        forwarder = AutomatedActionForwarder(
            signal_filter=config.signal_filter(),
            enabled=config.automated_actions_enabled,
        )
        return cls(
            recorder=recorder,
            forwarder=forwarder,
            default_confidence=config.default_signal_confidence,
            notifier=notifier,
        )

    def normalize(self, payload: Mapping[str, Any]) -> WebhookSignal:
        """
        Validate a raw payload and build a signal from it.

        The signal always gets a freshly generated id. An inbound ``id`` is
        kept in metadata like any other unrecognised key.

        Raises:
            ValidationError: if a required field is missing or any field is malformed
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("payload", "must be a JSON object")

        symbol = payload.get("symbol")
        if not isinstance(symbol, str) or not symbol.strip():
            raise ValidationError("symbol", "is required")

        action = payload.get("action")
        if not isinstance(action, str) or not action.strip():
            raise ValidationError("action", "is required")
        try:
            signal_action = SignalAction(action.strip().lower())
        except ValueError:
            allowed = ", ".join(a.value for a in SignalAction)
            raise ValidationError("action", f"must be one of {allowed}, got {action!r}")

        source = payload.get("source", SignalSource.EXTERNAL.value)
        try:
            signal_source = SignalSource(str(source).lower())
        except ValueError:
            raise ValidationError("source", f"unknown signal source {source!r}")

        confidence = _optional_number(payload, "confidence")
        if confidence is None:
            confidence = self.default_confidence
        elif not 0 <= confidence <= 1:
            raise ValidationError("confidence", "must be between 0 and 1")

        metadata = payload.get("metadata")
        if metadata is None:
            metadata = {}
        elif not isinstance(metadata, Mapping):
            raise ValidationError("metadata", "must be an object")

        extra = {k: v for k, v in payload.items() if k not in KNOWN_FIELDS}
        merged_metadata = {**extra, **dict(metadata)}

        return WebhookSignal(
            id=new_signal_id(),
            source=signal_source,
            timestamp=_parse_timestamp(payload.get("timestamp")),
            symbol=symbol.strip(),
            action=signal_action,
            price=_optional_number(payload, "price"),
            quantity=_optional_number(payload, "quantity"),
            confidence=confidence,
            metadata=merged_metadata,
        )

    async def process(self, payload: Mapping[str, Any]) -> IntakeResult:
        """
        Accept or reject a payload.

        A rejected payload is never recorded. Recording and forwarding
        failures are logged and do not change the outcome. Notification
        runs in the background.
        """
        try:
            signal = self.normalize(payload)
        except ValidationError as e:
            self.rejected_count += 1
            logger.info(f"Signal rejected: {e.reason}")
            return IntakeResult(accepted=False, reason=e.reason)

        self.accepted_count += 1
        engine_logger.signal(
            signal.symbol,
            action=signal.action.value,
            source=signal.source.value,
            confidence=signal.confidence,
            signal_id=signal.id,
        )

        recorded = await record_safely(self.recorder, WEBHOOK_SIGNAL, signal.to_record())

        forwarded = False
        if self.forwarder is not None:
            try:
                forwarded = await self.forwarder.forward(signal)
            except Exception as e:
                logger.warning(f"Automated action forwarding failed for {signal.id}: {e}")

        if self.notifier is not None:
            try:
                self.notifications.spawn(self.notifier.on_signal(signal), signal.id)
            except Exception as e:
                logger.warning(f"Notification for signal {signal.id} failed: {e}")

        return IntakeResult(accepted=True, signal=signal, recorded=recorded, forwarded=forwarded)

    async def process_tradingview(self, alert_data: Mapping[str, Any]) -> IntakeResult:
        """Process a raw TradingView alert body."""
        if not isinstance(alert_data, Mapping):
            self.rejected_count += 1
            reason = ValidationError("payload", "must be a JSON object").reason
            return IntakeResult(accepted=False, reason=reason)
        return await self.process(parse_tradingview_alert(alert_data))

    def get_stats(self) -> Dict[str, int]:
        return {
            "accepted": self.accepted_count,
            "rejected": self.rejected_count,
        }
