"""
Inbound signal intake: validation, defaults, recording and forwarding.
"""
from decision_engine.signals.intake.pipeline import SignalIntakePipeline, IntakeResult
from decision_engine.signals.intake.tradingview import parse_tradingview_alert
from decision_engine.signals.intake.actions import (
    SignalFilter,
    FilterDecision,
    ActionDispatcher,
    LoggingActionDispatcher,
    AutomatedActionForwarder,
)

__all__ = [
    "SignalIntakePipeline",
    "IntakeResult",
    "parse_tradingview_alert",
    "SignalFilter",
    "FilterDecision",
    "ActionDispatcher",
    "LoggingActionDispatcher",
    "AutomatedActionForwarder",
]
