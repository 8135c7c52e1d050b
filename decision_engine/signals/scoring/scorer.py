"""
Main prediction scorer that combines all scoring components.

Provides the prediction request surface: a pure synchronous ``score`` and an
async ``predict`` that adds the best-effort persistence and notification
side effects.
"""
import asyncio
import logging
from typing import List, Optional, Dict

from decision_engine.alerting.manager import NotificationDispatcher, NotificationTasks
from decision_engine.database.recorder import DecisionRecorder, record_safely, PREDICTION
from decision_engine.logging import logger as engine_logger, log_timing
from decision_engine.models.prediction import PredictionInput, PredictionResult, ComponentScores
from decision_engine.signals.scoring.types import ScoringConfig
from decision_engine.signals.scoring.combiner import EnsembleCombiner
from decision_engine.signals.scoring.classifier import RecommendationClassifier
from decision_engine.signals.scoring.components.technical import TechnicalScorer
from decision_engine.signals.scoring.components.momentum import MomentumScorer
from decision_engine.signals.scoring.components.volume import VolumeScorer
from decision_engine.signals.scoring.components.sentiment import SentimentAdapter

logger = logging.getLogger(__name__)


class PredictionScorer:
    """
    Scores an asset from indicator, price, volume and sentiment inputs.

    Components:
    - technical: RSI / MACD / EMA crossover heuristic
    - momentum: recent vs earlier price window
    - volume: recent vs historical volume
    - sentiment: pre-computed market sentiment

    Scoring holds no mutable state, so one instance can score different
    assets concurrently. In-flight notifications are tracked on
    ``notifications``.
    """

    def __init__(
        self,
        config: ScoringConfig = None,
        classifier: RecommendationClassifier = None,
        recorder: Optional[DecisionRecorder] = None,
        notifier: Optional[NotificationDispatcher] = None,
    ):
        self.config = config or ScoringConfig()
        self.config.validate()

        self.recorder = recorder
        self.notifier = notifier
        self.notifications = NotificationTasks()

        # Initialize component scorers
        self.technical_scorer = TechnicalScorer(self.config)
        self.momentum_scorer = MomentumScorer(self.config)
        self.volume_scorer = VolumeScorer(self.config)
        self.sentiment_adapter = SentimentAdapter()

        self.combiner = EnsembleCombiner(self.config)
        self.classifier = classifier or RecommendationClassifier()

    def component_scores(self, prediction_input: PredictionInput) -> ComponentScores:
        """Calculate all component scores."""
        return ComponentScores(
            technical=self.technical_scorer.score(prediction_input.technical_indicators),
            momentum=self.momentum_scorer.score(prediction_input.price_history),
            volume=self.volume_scorer.score(prediction_input.volume_history),
            sentiment=self.sentiment_adapter.score(prediction_input.market_sentiment),
        )

    def score(self, prediction_input: PredictionInput) -> PredictionResult:
        """
        Score a single asset. Pure and deterministic apart from id/timestamp.

        Raises:
            InputError: if the price history is empty
        """
        factors = self.component_scores(prediction_input)
        ensemble = self.combiner.combine(factors)

        target_price = self.combiner.target_price(prediction_input.price_history, ensemble.overall)
        recommendation, risk_level = self.classifier.classify(ensemble.overall, ensemble.confidence)

        return PredictionResult(
            symbol=prediction_input.symbol,
            direction=ensemble.direction,
            overall_score=ensemble.overall,
            confidence=ensemble.confidence,
            target_price=target_price,
            time_horizon=prediction_input.timeframe,
            factors=factors,
            risk_level=risk_level,
            recommendation=recommendation,
        )

    @log_timing
    async def predict(self, prediction_input: PredictionInput) -> PredictionResult:
        """
        Score, then persist and announce the result.

        Persistence failures are logged and swallowed; the computed result is
        always returned once scoring succeeds. Notification runs in the
        background and is never awaited here.
        """
        result = self.score(prediction_input)

        engine_logger.decision(
            result.symbol,
            recommendation=result.recommendation.value,
            overall=round(result.overall_score, 4),
            confidence=round(result.confidence, 4),
        )

        await record_safely(self.recorder, PREDICTION, result.to_record())

        if self.notifier is not None:
            try:
                self.notifications.spawn(self.notifier.on_prediction(result), result.symbol)
            except Exception as e:
                logger.warning(f"Notification for {result.symbol} failed: {e}")

        return result

    async def predict_many(self, inputs: List[PredictionInput]) -> List[PredictionResult]:
        """Score several assets concurrently."""
        results = await asyncio.gather(*[self.predict(i) for i in inputs])
        return list(results)

    def explain(self, prediction_input: PredictionInput) -> Dict[str, str]:
        """Human-readable reason per component."""
        factors = self.component_scores(prediction_input)
        return {
            "technical": self.technical_scorer.explain(prediction_input.technical_indicators),
            "momentum": f"{factors.momentum:.2f} from {len(prediction_input.price_history)} prices",
            "volume": f"{factors.volume:.2f} from {len(prediction_input.volume_history)} samples",
            "sentiment": f"{factors.sentiment:.2f} market sentiment",
        }
