import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List
from pydantic import BaseModel, Field, ConfigDict


class Timeframe(str, Enum):
    SHORT = "1h"
    MEDIUM = "4h"
    LONG = "1d"

    @property
    def bucket(self) -> str:
        return {
            Timeframe.SHORT: "short",
            Timeframe.MEDIUM: "medium",
            Timeframe.LONG: "long",
        }[self]


class Direction(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Recommendation(str, Enum):
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"
    STRONG_SELL = "strong_sell"

    @property
    def is_actionable(self) -> bool:
        return self is not Recommendation.HOLD


class BollingerBands(BaseModel):
    """Banded volatility bounds"""
    model_config = ConfigDict(allow_inf_nan=False)

    upper: float
    middle: float
    lower: float


class TechnicalIndicators(BaseModel):
    """Indicator bundle supplied with a prediction request"""
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    rsi: float  # Momentum oscillator, 0-100
    macd: float  # Trend convergence
    bollinger: BollingerBands
    ema20: float  # Short-window moving average
    ema50: float  # Long-window moving average


class PredictionInput(BaseModel):
    """
    Everything needed to score one asset.

    Price and volume histories are chronological and share one sampling
    cadence; they are never resampled.
    """
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    symbol: str = Field(..., min_length=1)
    timeframe: Timeframe
    price_history: List[float] = Field(default_factory=list, alias="priceHistory")
    volume_history: List[float] = Field(default_factory=list, alias="volumeHistory")
    technical_indicators: TechnicalIndicators = Field(..., alias="technicalIndicators")
    market_sentiment: float = Field(0.5, ge=0, le=1, alias="marketSentiment")
    news_score: float = Field(0.0, alias="newsScore")


class ComponentScores(BaseModel):
    """Per-factor scores, each clamped to [0, 1]"""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    technical: float = Field(ge=0, le=1)
    momentum: float = Field(ge=0, le=1)
    volume: float = Field(ge=0, le=1)
    sentiment: float = Field(ge=0, le=1)


class PredictionResult(BaseModel):
    """Immutable outcome of one scoring invocation"""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    symbol: str
    direction: Direction
    overall_score: float = Field(ge=0, le=1)
    confidence: float = Field(ge=0, le=1)
    target_price: float
    time_horizon: Timeframe
    factors: ComponentScores
    risk_level: RiskLevel
    recommendation: Recommendation
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_record(self) -> dict:
        """Serialize for the decision store."""
        return self.model_dump(mode="json")
