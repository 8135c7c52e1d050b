"""
Response models for the decision engine API.
"""
from datetime import datetime
from typing import Optional, List, Dict, Any

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""
    status: str  # "healthy", "degraded"
    version: str
    uptime_seconds: float
    services: Dict[str, str] = {}


class StatsResponse(BaseModel):
    """Intake and notification counters."""
    signals_accepted: int
    signals_rejected: int
    alerts_sent: int = 0
    alerts_failed: int = 0


class DecisionRecordResponse(BaseModel):
    """One persisted decision record."""
    entity_type: str
    entity_id: Optional[str] = None
    symbol: Optional[str] = None
    payload: Dict[str, Any]
    recorded_at: Optional[datetime] = None


class ExplanationResponse(BaseModel):
    """Per-component reasoning for a prediction input."""
    symbol: str
    factors: Dict[str, float]
    reasons: Dict[str, str]


class DecisionListResponse(BaseModel):
    records: List[DecisionRecordResponse]
    count: int
