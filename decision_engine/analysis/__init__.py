"""
Analysis collaborators feeding the scoring engine.
"""
from decision_engine.analysis.sentiment import (
    SentimentAnalysis,
    SentimentAnalyzer,
    LexicalSentimentAnalyzer,
)

__all__ = [
    "SentimentAnalysis",
    "SentimentAnalyzer",
    "LexicalSentimentAnalyzer",
]
