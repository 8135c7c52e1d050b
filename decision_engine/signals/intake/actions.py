"""
Automated-action forwarding for accepted signals.

Forwarding is optional and best-effort. A filter decides which accepted
signals are forwarded; it never affects acceptance or recording.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from decision_engine.models.signal import WebhookSignal

logger = logging.getLogger(__name__)


@dataclass
class FilterDecision:
    """Whether a signal should be forwarded, and why not."""
    forward: bool
    reason: str = ""


@dataclass
class SignalFilter:
    """
    Criteria for forwarding a signal to automated actions.

    Empty symbol / action lists mean "any".
    """
    symbols: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    min_confidence: float = 0.0

    def check(self, signal: WebhookSignal) -> FilterDecision:
        if self.symbols and signal.symbol.upper() not in self.symbols:
            return FilterDecision(False, f"symbol {signal.symbol} not in allowed symbols")
        if self.actions and signal.action.value not in self.actions:
            return FilterDecision(False, f"action {signal.action.value} not in allowed actions")
        if signal.confidence < self.min_confidence:
            return FilterDecision(
                False,
                f"confidence {signal.confidence:.2f} below minimum {self.min_confidence:.2f}",
            )
        return FilterDecision(True)


class ActionDispatcher(Protocol):
    async def trigger(self, signal: WebhookSignal) -> None:
        ...


class LoggingActionDispatcher:
    """
    Default dispatcher: logs and remembers what would be triggered.

    Does not place orders.
    """

    def __init__(self):
        self.triggered: List[str] = []

    async def trigger(self, signal: WebhookSignal) -> None:
        logger.info(f"Would trigger {signal.action.value} action for {signal.symbol}")
        self.triggered.append(signal.id)


class AutomatedActionForwarder:
    """Applies the filter and hands signals to a dispatcher, never raising."""

    def __init__(
        self,
        dispatcher: Optional[ActionDispatcher] = None,
        signal_filter: Optional[SignalFilter] = None,
        enabled: bool = True,
    ):
        self.dispatcher = dispatcher or LoggingActionDispatcher()
        self.filter = signal_filter or SignalFilter()
        self.enabled = enabled

    async def forward(self, signal: WebhookSignal) -> bool:
        """
        Forward a signal if enabled and it passes the filter.

        Returns:
            True if the dispatcher accepted the signal
        """
        if not self.enabled:
            return False

        decision = self.filter.check(signal)
        if not decision.forward:
            logger.debug(f"Signal {signal.id} not forwarded: {decision.reason}")
            return False

        try:
            await self.dispatcher.trigger(signal)
            return True
        except Exception as e:
            logger.warning(f"Failed to trigger automated actions for {signal.id}: {e}")
            return False
