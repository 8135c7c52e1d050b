"""
Signal scoring types and data structures.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, Any

from decision_engine.exceptions import ConfigurationError
from decision_engine.models.prediction import Direction

NEUTRAL_SCORE = 0.5


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp to [low, high]; non-finite values map to the neutral midpoint."""
    if value is None or not math.isfinite(value):
        return NEUTRAL_SCORE
    return max(low, min(high, value))


@dataclass
class ScoringConfig:
    """Configuration for prediction scoring."""

    # Component weights (must sum to 1.0)
    weights: Dict[str, float] = field(default_factory=lambda: {
        "technical": 0.4,
        "momentum": 0.3,
        "volume": 0.2,
        "sentiment": 0.1,
    })

    # Technical indicator rules
    rsi_oversold: float = 30.0
    rsi_overbought: float = 70.0
    rsi_adjustment: float = 0.20
    macd_adjustment: float = 0.15
    ema_crossover_adjustment: float = 0.10

    # Momentum: recent window vs the window before it
    momentum_window: int = 10
    momentum_scale: float = 5.0

    # Volume: recent window vs all earlier samples
    volume_window: int = 5
    volume_base: float = 0.3
    volume_scale: float = 0.4

    # Direction thresholds on the overall score
    bullish_threshold: float = 0.6
    bearish_threshold: float = 0.4

    # Largest predicted move as a fraction of price at overall=0 or 1 is half this
    target_move_scale: float = 0.1

    def validate(self) -> bool:
        """Validate configuration."""
        expected = {"technical", "momentum", "volume", "sentiment"}
        if set(self.weights) != expected:
            raise ConfigurationError(
                f"Weights must cover exactly {sorted(expected)}, got {sorted(self.weights)}"
            )
        if any(w < 0 for w in self.weights.values()):
            raise ConfigurationError(f"Weights must be non-negative, got {self.weights}")
        weight_sum = sum(self.weights.values())
        if abs(weight_sum - 1.0) > 1e-9:
            raise ConfigurationError(f"Weights must sum to 1.0, got {weight_sum}")
        return True


@dataclass(frozen=True)
class EnsembleScore:
    """Combined output of the ensemble: overall score, confidence and direction."""
    overall: float
    confidence: float
    direction: Direction

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall": self.overall,
            "confidence": self.confidence,
            "direction": self.direction.value,
        }
