"""
Momentum scoring component.

Compares the mean of the most recent window of prices against the
window immediately before it.
"""
import logging
from typing import Sequence

from decision_engine.signals.scoring.types import ScoringConfig, NEUTRAL_SCORE, clamp

logger = logging.getLogger(__name__)


class MomentumScorer:
    """Maps relative price change between two adjacent windows into [0, 1]."""

    def __init__(self, config: ScoringConfig = None):
        self.config = config or ScoringConfig()

    def score(self, price_history: Sequence[float]) -> float:
        if len(price_history) < 2:
            return NEUTRAL_SCORE

        window = self.config.momentum_window
        recent = list(price_history[-window:])
        earlier = list(price_history[-2 * window:-window])

        # Too short for a full earlier window, or nothing to compare against
        if not earlier:
            logger.debug(f"Momentum fallback: {len(price_history)} prices, no earlier window")
            return NEUTRAL_SCORE

        earlier_avg = sum(earlier) / len(earlier)
        if earlier_avg == 0:
            return NEUTRAL_SCORE

        momentum = (sum(recent) / len(recent) - earlier_avg) / earlier_avg
        return clamp(NEUTRAL_SCORE + momentum * self.config.momentum_scale)
