"""
Inbound signal API routes.
"""
import json
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from decision_engine.api.dependencies import get_pipeline, get_recorder
from decision_engine.api.models import DecisionListResponse, DecisionRecordResponse
from decision_engine.database.recorder import DecisionRecorder, WEBHOOK_SIGNAL
from decision_engine.models.signal import WebhookSignal
from decision_engine.signals.intake.pipeline import IntakeResult, SignalIntakePipeline

router = APIRouter(prefix="/api/signals", tags=["Signals"])


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(status_code=422, detail="Request body is not valid JSON")


def _accepted_or_422(result: IntakeResult) -> WebhookSignal:
    if not result.accepted:
        raise HTTPException(status_code=422, detail=result.reason)
    return result.signal


@router.post("/webhook", response_model=WebhookSignal, status_code=201)
async def receive_webhook_signal(
    request: Request,
    pipeline: SignalIntakePipeline = Depends(get_pipeline),
) -> WebhookSignal:
    """
    Accept an externally reported trade signal.

    - **symbol**, **action** (buy, sell, close) are required
    - unknown keys are kept as metadata
    """
    payload = await _json_body(request)
    return _accepted_or_422(await pipeline.process(payload))


@router.post("/tradingview", response_model=WebhookSignal, status_code=201)
async def receive_tradingview_alert(
    request: Request,
    pipeline: SignalIntakePipeline = Depends(get_pipeline),
) -> WebhookSignal:
    """Accept a raw TradingView alert body."""
    payload = await _json_body(request)
    return _accepted_or_422(await pipeline.process_tradingview(payload))


@router.get("", response_model=DecisionListResponse)
async def list_signals(
    symbol: Optional[str] = Query(None, description="Filter by symbol"),
    limit: int = Query(50, ge=1, le=500, description="Max results"),
    recorder: DecisionRecorder = Depends(get_recorder),
) -> DecisionListResponse:
    """Recently recorded signals, newest first."""
    records = await recorder.get_records(entity_type=WEBHOOK_SIGNAL, symbol=symbol, limit=limit)
    return DecisionListResponse(
        records=[DecisionRecordResponse(**r) for r in records],
        count=len(records),
    )
