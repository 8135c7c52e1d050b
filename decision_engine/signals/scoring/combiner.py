"""
Ensemble combiner.

Folds the four component scores into one overall score under a fixed
weighting policy and derives confidence, direction and a target price.
"""
import math
from typing import Sequence

from decision_engine.exceptions import InputError
from decision_engine.models.prediction import ComponentScores, Direction
from decision_engine.signals.scoring.types import ScoringConfig, EnsembleScore, NEUTRAL_SCORE, clamp


class EnsembleCombiner:
    """
    Weighted ensemble over component scores.

    overall = 0.4*technical + 0.3*momentum + 0.2*volume + 0.1*sentiment

    The weights are a convex combination, so overall stays in [0, 1] when
    every component does. Holds no state beyond its configuration.
    """

    def __init__(self, config: ScoringConfig = None):
        self.config = config or ScoringConfig()
        self.config.validate()

    def overall_score(self, scores: ComponentScores) -> float:
        w = self.config.weights
        overall = (
            scores.technical * w["technical"] +
            scores.momentum * w["momentum"] +
            scores.volume * w["volume"] +
            scores.sentiment * w["sentiment"]
        )
        return clamp(overall)

    @staticmethod
    def confidence(overall: float) -> float:
        """Distance from the neutral midpoint, rescaled to [0, 1]."""
        return clamp(abs(overall - NEUTRAL_SCORE) * 2)

    def direction(self, overall: float) -> Direction:
        if overall > self.config.bullish_threshold:
            return Direction.BULLISH
        if overall < self.config.bearish_threshold:
            return Direction.BEARISH
        return Direction.NEUTRAL

    def combine(self, scores: ComponentScores) -> EnsembleScore:
        overall = self.overall_score(scores)
        return EnsembleScore(
            overall=overall,
            confidence=self.confidence(overall),
            direction=self.direction(overall),
        )

    def target_price(self, price_history: Sequence[float], overall: float) -> float:
        """
        Project a target from the latest price.

        The move is bounded to +/-5% of the current price by default.

        Raises:
            InputError: if the price history is empty, or the projected
                target does not fit in a float
        """
        if not price_history:
            raise InputError("Cannot derive target price from an empty price history")

        current_price = price_history[-1]
        price_change = (overall - NEUTRAL_SCORE) * self.config.target_move_scale
        target = current_price * (1 + price_change)
        if not math.isfinite(target):
            raise InputError(f"Target price overflows for current price {current_price}")
        return target
