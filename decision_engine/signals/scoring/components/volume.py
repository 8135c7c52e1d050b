"""
Volume scoring component.

Compares recent traded volume against the historical average.
"""
import logging
from typing import Sequence

from decision_engine.signals.scoring.types import ScoringConfig, NEUTRAL_SCORE, clamp

logger = logging.getLogger(__name__)


class VolumeScorer:
    """
    Scores volume expansion.

    A recent/historical ratio of 1.0 maps to 0.3, so flat volume reads as
    mildly weak; doubling volume lifts the score to 0.7.
    """

    def __init__(self, config: ScoringConfig = None):
        self.config = config or ScoringConfig()

    def score(self, volume_history: Sequence[float]) -> float:
        if len(volume_history) < 2:
            return NEUTRAL_SCORE

        window = self.config.volume_window
        recent = list(volume_history[-window:])
        historical = list(volume_history[:-window])

        if not historical:
            logger.debug(f"Volume fallback: {len(volume_history)} samples, no history before window")
            return NEUTRAL_SCORE

        historical_avg = sum(historical) / len(historical)
        if historical_avg == 0:
            return NEUTRAL_SCORE

        ratio = (sum(recent) / len(recent)) / historical_avg
        return clamp(self.config.volume_base + (ratio - 1) * self.config.volume_scale)
