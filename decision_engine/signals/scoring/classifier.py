"""
Recommendation classifier.

Maps (overall score, confidence) onto a discrete trading stance and a
risk tier. Thresholds are evaluated in order; the confidence gate comes
first, so a low-confidence extreme score is still a hold.
"""
from dataclasses import dataclass
from typing import Tuple

from decision_engine.models.prediction import Recommendation, RiskLevel


@dataclass(frozen=True)
class ClassifierThresholds:
    """Ordered thresholds. All comparisons are strict."""
    min_confidence: float = 0.5
    strong_buy_above: float = 0.8
    buy_above: float = 0.6
    strong_sell_below: float = 0.2
    sell_below: float = 0.4
    low_risk_above: float = 0.8
    medium_risk_above: float = 0.6


class RecommendationClassifier:
    """Pure function of (overall, confidence); no state beyond thresholds."""

    def __init__(self, thresholds: ClassifierThresholds = None):
        self.thresholds = thresholds or ClassifierThresholds()

    def recommend(self, overall: float, confidence: float) -> Recommendation:
        t = self.thresholds

        if confidence < t.min_confidence:
            return Recommendation.HOLD

        if overall > t.strong_buy_above:
            return Recommendation.STRONG_BUY
        if overall > t.buy_above:
            return Recommendation.BUY
        if overall < t.strong_sell_below:
            return Recommendation.STRONG_SELL
        if overall < t.sell_below:
            return Recommendation.SELL
        return Recommendation.HOLD

    def risk_level(self, confidence: float) -> RiskLevel:
        t = self.thresholds
        if confidence > t.low_risk_above:
            return RiskLevel.LOW
        if confidence > t.medium_risk_above:
            return RiskLevel.MEDIUM
        return RiskLevel.HIGH

    def classify(self, overall: float, confidence: float) -> Tuple[Recommendation, RiskLevel]:
        return self.recommend(overall, confidence), self.risk_level(confidence)
