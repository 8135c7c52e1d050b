import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional
from pydantic import BaseModel, Field, ConfigDict


class SignalSource(str, Enum):
    TRADINGVIEW = "tradingview"
    EXTERNAL = "external"
    TELEGRAM = "telegram"
    CUSTOM = "custom"


class SignalAction(str, Enum):
    BUY = "buy"
    SELL = "sell"
    CLOSE = "close"


def new_signal_id() -> str:
    return f"signal_{uuid.uuid4().hex}"


class WebhookSignal(BaseModel):
    """Normalized, validated record of an externally reported trade suggestion"""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str = Field(default_factory=new_signal_id)
    source: SignalSource = SignalSource.EXTERNAL
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    symbol: str = Field(..., min_length=1)
    action: SignalAction
    price: Optional[float] = None
    quantity: Optional[float] = None
    confidence: float = Field(0.7, ge=0, le=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_record(self) -> dict:
        """Serialize for the decision store."""
        return self.model_dump(mode="json")
