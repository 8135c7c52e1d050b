"""
Scoring component implementations.

Each component scores a specific aspect of a prediction input on [0, 1].
"""
from decision_engine.signals.scoring.components.technical import TechnicalScorer
from decision_engine.signals.scoring.components.momentum import MomentumScorer
from decision_engine.signals.scoring.components.volume import VolumeScorer
from decision_engine.signals.scoring.components.sentiment import SentimentAdapter

__all__ = [
    "TechnicalScorer",
    "MomentumScorer",
    "VolumeScorer",
    "SentimentAdapter",
]
