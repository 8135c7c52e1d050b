"""
Comprehensive tests for the prediction scoring system.
"""
import asyncio
import math

import pytest
from unittest.mock import AsyncMock, MagicMock

from decision_engine.exceptions import CollaboratorError, ConfigurationError, InputError
from decision_engine.database.recorder import InMemoryDecisionRecorder, PREDICTION
from decision_engine.models.prediction import (
    BollingerBands,
    ComponentScores,
    Direction,
    PredictionInput,
    Recommendation,
    RiskLevel,
    TechnicalIndicators,
    Timeframe,
)
from decision_engine.signals.scoring import (
    ClassifierThresholds,
    EnsembleCombiner,
    PredictionScorer,
    RecommendationClassifier,
    ScoringConfig,
)
from decision_engine.signals.scoring.components import (
    MomentumScorer,
    SentimentAdapter,
    TechnicalScorer,
    VolumeScorer,
)
from decision_engine.signals.scoring.types import clamp
from decision_engine.analysis.sentiment import SentimentAnalysis


# ============================================================================
# Fixtures
# ============================================================================

def make_indicators(rsi=50.0, macd=0.0, ema20=100.0, ema50=100.0):
    return TechnicalIndicators(
        rsi=rsi,
        macd=macd,
        bollinger=BollingerBands(upper=110.0, middle=100.0, lower=90.0),
        ema20=ema20,
        ema50=ema50,
    )


@pytest.fixture
def config():
    """Default scoring configuration."""
    return ScoringConfig()


@pytest.fixture
def bullish_input():
    """Oversold, positive MACD, rising prices, expanding volume."""
    return PredictionInput(
        symbol="BTC",
        timeframe=Timeframe.MEDIUM,
        price_history=[100.0] * 10 + [110.0] * 10,
        volume_history=[100.0] * 5 + [200.0] * 5,
        technical_indicators=make_indicators(rsi=25, macd=1.5, ema20=105, ema50=100),
        market_sentiment=0.8,
    )


@pytest.fixture
def bearish_input():
    """Overbought, negative MACD, falling prices, flat volume."""
    return PredictionInput(
        symbol="ETH",
        timeframe=Timeframe.SHORT,
        price_history=[100.0] * 10 + [90.0] * 10,
        volume_history=[100.0] * 10,
        technical_indicators=make_indicators(rsi=80, macd=-2.0, ema20=95, ema50=100),
        market_sentiment=0.2,
    )


# ============================================================================
# Component Tests
# ============================================================================

class TestTechnicalScorer:
    """Tests for the indicator heuristic."""

    def test_all_bullish_rules(self, config):
        scorer = TechnicalScorer(config)
        score = scorer.score(make_indicators(rsi=25, macd=1, ema20=105, ema50=100))
        assert score == pytest.approx(0.95)

    def test_all_bearish_rules(self, config):
        scorer = TechnicalScorer(config)
        score = scorer.score(make_indicators(rsi=75, macd=-1, ema20=95, ema50=100))
        assert score == pytest.approx(0.05)

    def test_neutral_rsi_band(self, config):
        """RSI between 30 and 70 applies no adjustment."""
        scorer = TechnicalScorer(config)
        score = scorer.score(make_indicators(rsi=50, macd=1, ema20=95, ema50=100))
        assert score == pytest.approx(0.55)

    def test_zero_macd_counts_as_negative(self, config):
        scorer = TechnicalScorer(config)
        score = scorer.score(make_indicators(rsi=50, macd=0, ema20=105, ema50=100))
        assert score == pytest.approx(0.45)

    def test_rsi_boundaries_are_strict(self, config):
        scorer = TechnicalScorer(config)
        at_30 = scorer.score(make_indicators(rsi=30, macd=1, ema20=105, ema50=100))
        at_70 = scorer.score(make_indicators(rsi=70, macd=1, ema20=105, ema50=100))
        assert at_30 == pytest.approx(0.75)
        assert at_70 == pytest.approx(0.75)

    def test_explain(self, config):
        scorer = TechnicalScorer(config)
        text = scorer.explain(make_indicators(rsi=25, macd=1, ema20=105, ema50=100))
        assert "oversold" in text
        assert "MACD positive" in text
        assert "EMA20 above EMA50" in text


class TestMomentumScorer:
    """Tests for price momentum."""

    def test_rising_prices(self, config):
        scorer = MomentumScorer(config)
        # +2% between windows -> 0.5 + 0.02 * 5
        prices = [100.0] * 10 + [102.0] * 10
        assert scorer.score(prices) == pytest.approx(0.6)

    def test_falling_prices_clamped(self, config):
        scorer = MomentumScorer(config)
        prices = [100.0] * 10 + [50.0] * 10
        assert scorer.score(prices) == 0.0

    def test_only_last_twenty_prices_used(self, config):
        scorer = MomentumScorer(config)
        prices = [1.0] * 30 + [100.0] * 10 + [102.0] * 10
        assert scorer.score(prices) == pytest.approx(0.6)

    def test_partial_earlier_window(self, config):
        scorer = MomentumScorer(config)
        # earlier window is the 5 prices before the last 10
        prices = [100.0] * 5 + [101.0] * 10
        assert scorer.score(prices) == pytest.approx(0.55)

    @pytest.mark.parametrize("prices", [[], [100.0]])
    def test_fewer_than_two_prices_is_neutral(self, config, prices):
        assert MomentumScorer(config).score(prices) == 0.5

    @pytest.mark.parametrize("length", [2, 5, 10])
    def test_no_earlier_window_is_neutral(self, config, length):
        prices = [100.0 + i for i in range(length)]
        assert MomentumScorer(config).score(prices) == 0.5

    def test_zero_earlier_mean_is_neutral(self, config):
        prices = [0.0] * 10 + [5.0] * 10
        assert MomentumScorer(config).score(prices) == 0.5

    def test_huge_finite_prices_stay_in_range(self, config):
        assert MomentumScorer(config).score([1e308] * 20) == 0.5


class TestVolumeScorer:
    """Tests for volume expansion."""

    def test_flat_volume_reads_weak(self, config):
        assert VolumeScorer(config).score([100.0] * 10) == pytest.approx(0.3)

    def test_doubled_volume(self, config):
        volumes = [100.0] * 5 + [200.0] * 5
        assert VolumeScorer(config).score(volumes) == pytest.approx(0.7)

    def test_collapsed_volume_clamped(self, config):
        volumes = [100.0] * 5 + [0.0] * 5
        assert VolumeScorer(config).score(volumes) == 0.0

    def test_historical_uses_all_earlier_samples(self, config):
        volumes = [50.0] * 5 + [150.0] * 5 + [200.0] * 5
        # historical mean 100, recent 200
        assert VolumeScorer(config).score(volumes) == pytest.approx(0.7)

    @pytest.mark.parametrize("volumes", [[], [10.0], [1.0, 2.0, 3.0, 4.0, 5.0]])
    def test_short_history_is_neutral(self, config, volumes):
        assert VolumeScorer(config).score(volumes) == 0.5

    def test_zero_historical_mean_is_neutral(self, config):
        volumes = [0.0] * 5 + [10.0] * 5
        assert VolumeScorer(config).score(volumes) == 0.5

    def test_huge_finite_volumes_stay_in_range(self, config):
        assert VolumeScorer(config).score([1e308] * 10) == 0.5


class TestSentimentAdapter:
    """Tests for the sentiment pass-through."""

    def test_passes_through(self):
        assert SentimentAdapter().score(0.73) == pytest.approx(0.73)

    def test_non_finite_is_neutral(self):
        assert SentimentAdapter().score(math.nan) == 0.5

    @pytest.mark.parametrize("raw,expected", [(-1.0, 0.0), (0.0, 0.5), (1.0, 1.0), (0.5, 0.75)])
    def test_from_analysis(self, raw, expected):
        analysis = SentimentAnalysis(sentiment="x", score=raw, confidence=1.0)
        assert SentimentAdapter().from_analysis(analysis) == pytest.approx(expected)


class TestClamp:

    def test_bounds(self):
        assert clamp(-0.3) == 0.0
        assert clamp(1.7) == 1.0

    def test_nan_and_inf(self):
        assert clamp(math.nan) == 0.5
        assert clamp(math.inf) == 0.5


# ============================================================================
# Combiner Tests
# ============================================================================

class TestScoringConfig:

    def test_default_weights_sum_to_one(self, config):
        assert sum(config.weights.values()) == pytest.approx(1.0)
        assert config.validate()

    def test_bad_weight_sum_rejected(self):
        cfg = ScoringConfig(weights={"technical": 0.5, "momentum": 0.3, "volume": 0.2, "sentiment": 0.1})
        with pytest.raises(ConfigurationError):
            cfg.validate()

    def test_missing_component_rejected(self):
        cfg = ScoringConfig(weights={"technical": 0.5, "momentum": 0.5})
        with pytest.raises(ConfigurationError):
            EnsembleCombiner(cfg)

    def test_negative_weight_rejected(self):
        cfg = ScoringConfig(weights={"technical": 1.2, "momentum": -0.2, "volume": 0.0, "sentiment": 0.0})
        with pytest.raises(ConfigurationError):
            cfg.validate()


class TestEnsembleCombiner:
    """Tests for weighting, confidence, direction and target price."""

    def test_overall_weighting(self, config):
        combiner = EnsembleCombiner(config)
        scores = ComponentScores(technical=1.0, momentum=0.0, volume=0.5, sentiment=1.0)
        assert combiner.overall_score(scores) == pytest.approx(0.4 + 0.0 + 0.1 + 0.1)

    def test_all_neutral_components(self, config):
        combiner = EnsembleCombiner(config)
        result = combiner.combine(ComponentScores(technical=0.5, momentum=0.5, volume=0.5, sentiment=0.5))
        assert result.overall == pytest.approx(0.5)
        assert result.confidence == pytest.approx(0.0)
        assert result.direction == Direction.NEUTRAL

    @pytest.mark.parametrize("overall,expected", [
        (0.5, 0.0), (1.0, 1.0), (0.0, 1.0), (0.75, 0.5), (0.3, 0.4),
    ])
    def test_confidence(self, overall, expected):
        assert EnsembleCombiner.confidence(overall) == pytest.approx(expected)

    @pytest.mark.parametrize("overall,direction", [
        (0.61, Direction.BULLISH),
        (0.6, Direction.NEUTRAL),
        (0.4, Direction.NEUTRAL),
        (0.39, Direction.BEARISH),
    ])
    def test_direction_thresholds_are_strict(self, config, overall, direction):
        assert EnsembleCombiner(config).direction(overall) == direction

    def test_target_price(self, config):
        combiner = EnsembleCombiner(config)
        assert combiner.target_price([90.0, 95.0, 100.0], 0.75) == pytest.approx(102.5)

    def test_target_price_neutral(self, config):
        assert EnsembleCombiner(config).target_price([100.0], 0.5) == pytest.approx(100.0)

    def test_target_price_empty_history(self, config):
        with pytest.raises(InputError):
            EnsembleCombiner(config).target_price([], 0.75)

    def test_target_price_overflow(self, config):
        with pytest.raises(InputError):
            EnsembleCombiner(config).target_price([1.79e308], 0.9)


# ============================================================================
# Classifier Tests
# ============================================================================

class TestRecommendationClassifier:
    """Tests for the ordered threshold classifier."""

    @pytest.fixture
    def classifier(self):
        return RecommendationClassifier()

    def test_confidence_gate_precedes_strong_buy(self, classifier):
        assert classifier.recommend(overall=0.95, confidence=0.4) == Recommendation.HOLD

    def test_boundary_at_point_eight_is_buy(self, classifier):
        assert classifier.recommend(overall=0.8, confidence=0.6) == Recommendation.BUY

    @pytest.mark.parametrize("overall,confidence,expected", [
        (0.9, 0.8, Recommendation.STRONG_BUY),
        (0.7, 0.5, Recommendation.BUY),
        (0.6, 0.9, Recommendation.HOLD),
        (0.5, 0.9, Recommendation.HOLD),
        (0.4, 0.9, Recommendation.HOLD),
        (0.3, 0.5, Recommendation.SELL),
        (0.2, 0.6, Recommendation.SELL),
        (0.1, 0.8, Recommendation.STRONG_SELL),
    ])
    def test_recommendation_table(self, classifier, overall, confidence, expected):
        assert classifier.recommend(overall, confidence) == expected

    @pytest.mark.parametrize("confidence,expected", [
        (0.95, RiskLevel.LOW),
        (0.8, RiskLevel.MEDIUM),
        (0.7, RiskLevel.MEDIUM),
        (0.6, RiskLevel.HIGH),
        (0.1, RiskLevel.HIGH),
    ])
    def test_risk_level(self, classifier, confidence, expected):
        assert classifier.risk_level(confidence) == expected

    def test_deterministic(self, classifier):
        first = [classifier.classify(o / 20, c / 20) for o in range(21) for c in range(21)]
        second = [classifier.classify(o / 20, c / 20) for o in range(21) for c in range(21)]
        assert first == second

    def test_custom_thresholds(self):
        classifier = RecommendationClassifier(ClassifierThresholds(min_confidence=0.0))
        assert classifier.recommend(overall=0.65, confidence=0.3) == Recommendation.BUY


# ============================================================================
# Scorer Tests
# ============================================================================

class TestPredictionScorer:
    """End-to-end scoring."""

    def test_bullish_prediction(self, bullish_input):
        result = PredictionScorer().score(bullish_input)

        assert result.symbol == "BTC"
        assert result.factors.technical == pytest.approx(0.95)
        assert result.factors.momentum == pytest.approx(1.0)
        assert result.factors.volume == pytest.approx(0.7)
        assert result.factors.sentiment == pytest.approx(0.8)
        assert result.overall_score == pytest.approx(0.9)
        assert result.confidence == pytest.approx(0.8)
        assert result.direction == Direction.BULLISH
        assert result.recommendation == Recommendation.STRONG_BUY
        assert result.target_price == pytest.approx(110.0 * 1.04)
        assert result.time_horizon == Timeframe.MEDIUM

    def test_bearish_prediction(self, bearish_input):
        result = PredictionScorer().score(bearish_input)

        assert result.overall_score == pytest.approx(0.1)
        assert result.direction == Direction.BEARISH
        assert result.recommendation == Recommendation.STRONG_SELL
        assert result.target_price < 90.0

    def test_short_histories_score_neutral(self):
        prediction_input = PredictionInput(
            symbol="SOL",
            timeframe=Timeframe.LONG,
            price_history=[42.0],
            volume_history=[10.0],
            technical_indicators=make_indicators(),
            market_sentiment=0.5,
        )
        result = PredictionScorer().score(prediction_input)

        assert result.factors.momentum == 0.5
        assert result.factors.volume == 0.5
        assert 0.0 <= result.overall_score <= 1.0
        assert result.target_price > 0

    def test_empty_price_history_raises(self):
        prediction_input = PredictionInput(
            symbol="SOL",
            timeframe=Timeframe.LONG,
            technical_indicators=make_indicators(),
        )
        with pytest.raises(InputError):
            PredictionScorer().score(prediction_input)

    def test_scores_stay_in_range(self):
        scorer = PredictionScorer()
        for rsi in (10, 50, 90):
            for macd in (-5, 5):
                for tail in (1.0, 100.0, 10000.0):
                    prediction_input = PredictionInput(
                        symbol="X",
                        timeframe=Timeframe.SHORT,
                        price_history=[100.0] * 10 + [tail] * 10,
                        volume_history=[1.0] * 5 + [tail] * 5,
                        technical_indicators=make_indicators(rsi=rsi, macd=macd),
                        market_sentiment=0.5,
                    )
                    result = scorer.score(prediction_input)
                    for value in result.factors.model_dump().values():
                        assert 0.0 <= value <= 1.0
                    assert 0.0 <= result.overall_score <= 1.0
                    assert 0.0 <= result.confidence <= 1.0

    def test_deterministic_apart_from_identity(self, bullish_input):
        scorer = PredictionScorer()
        a = scorer.score(bullish_input)
        b = scorer.score(bullish_input)

        assert a.id != b.id
        assert a.model_dump(exclude={"id", "created_at"}) == b.model_dump(exclude={"id", "created_at"})

    def test_accepts_camel_case_payload(self):
        prediction_input = PredictionInput.model_validate({
            "symbol": "BTC",
            "timeframe": "4h",
            "priceHistory": [100, 101],
            "volumeHistory": [5, 6],
            "technicalIndicators": {
                "rsi": 50, "macd": 0.1, "ema20": 1, "ema50": 2,
                "bollinger": {"upper": 3, "middle": 2, "lower": 1},
            },
            "marketSentiment": 0.6,
            "newsScore": 0.2,
        })
        assert prediction_input.timeframe.bucket == "medium"
        assert PredictionScorer().score(prediction_input).symbol == "BTC"

    def test_huge_finite_history_scores_in_range(self, bullish_input):
        prediction_input = bullish_input.model_copy(update={"price_history": [1e308] * 20})
        result = PredictionScorer().score(prediction_input)

        assert result.factors.momentum == 0.5
        assert 0.0 <= result.overall_score <= 1.0
        assert math.isfinite(result.target_price)

    def test_target_overflow_raises_input_error(self, bullish_input):
        prediction_input = bullish_input.model_copy(update={"price_history": [1.79e308]})
        with pytest.raises(InputError):
            PredictionScorer().score(prediction_input)

    def test_explain(self, bullish_input):
        reasons = PredictionScorer().explain(bullish_input)
        assert set(reasons) == {"technical", "momentum", "volume", "sentiment"}


class TestPredictionScorerSideEffects:
    """Persistence and notification must never change the outcome."""

    @pytest.mark.asyncio
    async def test_predict_records_once(self, bullish_input):
        recorder = InMemoryDecisionRecorder()
        scorer = PredictionScorer(recorder=recorder)

        result = await scorer.predict(bullish_input)

        assert len(recorder.records) == 1
        record = recorder.records[0]
        assert record["entity_type"] == PREDICTION
        assert record["entity_id"] == result.id
        assert record["payload"]["recommendation"] == "strong_buy"

    @pytest.mark.asyncio
    async def test_recorder_failure_still_returns_result(self, bullish_input):
        recorder = MagicMock()
        recorder.record = AsyncMock(side_effect=CollaboratorError("decision store", "disk full"))
        scorer = PredictionScorer(recorder=recorder)

        result = await scorer.predict(bullish_input)

        assert result.recommendation == Recommendation.STRONG_BUY
        recorder.record.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unexpected_recorder_error_still_returns_result(self, bullish_input):
        recorder = MagicMock()
        recorder.record = AsyncMock(side_effect=RuntimeError("boom"))

        result = await PredictionScorer(recorder=recorder).predict(bullish_input)

        assert result.symbol == "BTC"

    @pytest.mark.asyncio
    async def test_notifier_failure_still_returns_result(self, bullish_input):
        notifier = MagicMock()
        notifier.on_prediction = AsyncMock(side_effect=RuntimeError("telegram down"))
        recorder = InMemoryDecisionRecorder()
        scorer = PredictionScorer(recorder=recorder, notifier=notifier)

        result = await scorer.predict(bullish_input)
        await scorer.notifications.drain()

        assert result.recommendation == Recommendation.STRONG_BUY
        assert len(recorder.records) == 1
        notifier.on_prediction.assert_awaited_once_with(result)
        assert scorer.notifications.pending == 0

    @pytest.mark.asyncio
    async def test_slow_notifier_does_not_delay_result(self, bullish_input):
        release = asyncio.Event()
        delivered = []

        async def slow_on_prediction(result):
            await release.wait()
            delivered.append(result.id)

        notifier = MagicMock()
        notifier.on_prediction = slow_on_prediction
        recorder = InMemoryDecisionRecorder()
        scorer = PredictionScorer(recorder=recorder, notifier=notifier)

        result = await asyncio.wait_for(scorer.predict(bullish_input), timeout=1.0)

        assert len(recorder.records) == 1
        assert delivered == []
        assert scorer.notifications.pending == 1

        release.set()
        await scorer.notifications.drain()
        assert delivered == [result.id]
        assert scorer.notifications.pending == 0

    @pytest.mark.asyncio
    async def test_empty_history_not_recorded(self):
        recorder = InMemoryDecisionRecorder()
        prediction_input = PredictionInput(
            symbol="SOL",
            timeframe=Timeframe.LONG,
            technical_indicators=make_indicators(),
        )
        with pytest.raises(InputError):
            await PredictionScorer(recorder=recorder).predict(prediction_input)
        assert recorder.records == []

    @pytest.mark.asyncio
    async def test_predict_many_concurrently(self, bullish_input, bearish_input):
        recorder = InMemoryDecisionRecorder()
        scorer = PredictionScorer(recorder=recorder)

        results = await scorer.predict_many([bullish_input, bearish_input] * 5)

        assert [r.symbol for r in results] == ["BTC", "ETH"] * 5
        assert len(recorder.records) == 10
        assert len({r["entity_id"] for r in recorder.records}) == 10
