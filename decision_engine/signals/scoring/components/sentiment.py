"""
Sentiment scoring component.

Sentiment is computed upstream; this adapter only brings it onto the
component scale.
"""
from decision_engine.analysis.sentiment import SentimentAnalysis
from decision_engine.signals.scoring.types import clamp


class SentimentAdapter:
    """Passes a pre-computed [0, 1] sentiment scalar through as the sentiment component."""

    def score(self, market_sentiment: float) -> float:
        return clamp(market_sentiment)

    def from_analysis(self, analysis: SentimentAnalysis) -> float:
        """Rescale a [-1, 1] analyzer score onto [0, 1]."""
        return clamp((analysis.score + 1) / 2)
