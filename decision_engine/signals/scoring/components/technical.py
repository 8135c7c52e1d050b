"""
Technical indicator scoring component.

Rule-based heuristic over the indicator bundle, not a trained model.
"""
from decision_engine.models.prediction import TechnicalIndicators
from decision_engine.signals.scoring.types import ScoringConfig, NEUTRAL_SCORE, clamp


class TechnicalScorer:
    """
    Scores the technical indicator bundle.

    Starts from a neutral 0.5 and applies independent additive adjustments:
    - RSI oversold (< 30) adds, overbought (> 70) subtracts
    - MACD positive adds, non-positive subtracts
    - EMA20 above EMA50 adds, otherwise subtracts
    """

    def __init__(self, config: ScoringConfig = None):
        self.config = config or ScoringConfig()

    def score(self, indicators: TechnicalIndicators) -> float:
        cfg = self.config
        score = NEUTRAL_SCORE

        # RSI
        if indicators.rsi < cfg.rsi_oversold:
            score += cfg.rsi_adjustment
        elif indicators.rsi > cfg.rsi_overbought:
            score -= cfg.rsi_adjustment

        # MACD
        if indicators.macd > 0:
            score += cfg.macd_adjustment
        else:
            score -= cfg.macd_adjustment

        # EMA crossover
        if indicators.ema20 > indicators.ema50:
            score += cfg.ema_crossover_adjustment
        else:
            score -= cfg.ema_crossover_adjustment

        return clamp(score)

    def explain(self, indicators: TechnicalIndicators) -> str:
        """Build human-readable explanation."""
        parts = []
        if indicators.rsi < self.config.rsi_oversold:
            parts.append(f"RSI {indicators.rsi:.0f} oversold")
        elif indicators.rsi > self.config.rsi_overbought:
            parts.append(f"RSI {indicators.rsi:.0f} overbought")
        parts.append("MACD positive" if indicators.macd > 0 else "MACD non-positive")
        parts.append(
            "EMA20 above EMA50" if indicators.ema20 > indicators.ema50 else "EMA20 at or below EMA50"
        )
        return ", ".join(parts)
