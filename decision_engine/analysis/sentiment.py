"""
Text sentiment analysis.

The engine consumes sentiment as a pre-computed scalar. This module holds the
analyzer interface plus a lexical default implementation that counts
positive and negative market vocabulary.
"""
import logging
from dataclasses import dataclass
from typing import Protocol, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentimentAnalysis:
    """Analyzer output. ``score`` is in [-1, 1]."""
    sentiment: str  # positive, negative, neutral
    score: float
    confidence: float


class SentimentAnalyzer(Protocol):
    def analyze(self, text: str) -> SentimentAnalysis:
        ...


class LexicalSentimentAnalyzer:
    """
    Word-count sentiment over a small market lexicon.

    A token counts as positive (or negative) when any lexicon word is a
    substring of it, so "surged" and "crashing" both match.
    """

    POSITIVE_WORDS: Tuple[str, ...] = ("bullish", "surge", "breakthrough", "adoption", "growth", "success")
    NEGATIVE_WORDS: Tuple[str, ...] = ("bearish", "crash", "decline", "regulation", "ban", "hack")

    # Net score beyond which text is labelled positive / negative
    LABEL_THRESHOLD = 0.1
    # Sentiment-bearing words needed for full confidence
    FULL_CONFIDENCE_WORDS = 10

    def analyze(self, text: str) -> SentimentAnalysis:
        positive_count = 0
        negative_count = 0

        for word in text.lower().split():
            if any(pw in word for pw in self.POSITIVE_WORDS):
                positive_count += 1
            if any(nw in word for nw in self.NEGATIVE_WORDS):
                negative_count += 1

        total = positive_count + negative_count
        if total == 0:
            return SentimentAnalysis(sentiment="neutral", score=0.0, confidence=0.5)

        score = (positive_count - negative_count) / total
        if score > self.LABEL_THRESHOLD:
            sentiment = "positive"
        elif score < -self.LABEL_THRESHOLD:
            sentiment = "negative"
        else:
            sentiment = "neutral"

        confidence = min(total / self.FULL_CONFIDENCE_WORDS, 1.0)

        logger.debug(
            f"Lexical sentiment: +{positive_count} -{negative_count} -> {sentiment} ({score:.2f})"
        )
        return SentimentAnalysis(sentiment=sentiment, score=score, confidence=confidence)
