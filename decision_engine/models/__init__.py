"""
Data Models Package.
"""

from decision_engine.models.prediction import (
    Timeframe,
    Direction,
    RiskLevel,
    Recommendation,
    BollingerBands,
    TechnicalIndicators,
    PredictionInput,
    ComponentScores,
    PredictionResult,
)
from decision_engine.models.signal import (
    SignalSource,
    SignalAction,
    WebhookSignal,
)

__all__ = [
    # Prediction
    "Timeframe",
    "Direction",
    "RiskLevel",
    "Recommendation",
    "BollingerBands",
    "TechnicalIndicators",
    "PredictionInput",
    "ComponentScores",
    "PredictionResult",

    # Signal
    "SignalSource",
    "SignalAction",
    "WebhookSignal",
]
