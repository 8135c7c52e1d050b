"""
Prediction scoring system.

Normalizes indicator, price, volume and sentiment inputs into component
scores, combines them under a fixed weighting policy and classifies the
result into a trading recommendation.
"""
from decision_engine.signals.scoring.types import (
    ScoringConfig,
    EnsembleScore,
    NEUTRAL_SCORE,
)
from decision_engine.signals.scoring.combiner import EnsembleCombiner
from decision_engine.signals.scoring.classifier import (
    RecommendationClassifier,
    ClassifierThresholds,
)
from decision_engine.signals.scoring.scorer import PredictionScorer

__all__ = [
    # Types
    "ScoringConfig",
    "EnsembleScore",
    "NEUTRAL_SCORE",
    # Combiner
    "EnsembleCombiner",
    # Classifier
    "RecommendationClassifier",
    "ClassifierThresholds",
    # Scorer
    "PredictionScorer",
]
