"""
Prediction API routes.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from decision_engine.api.dependencies import get_scorer, get_recorder
from decision_engine.api.models import (
    DecisionListResponse,
    DecisionRecordResponse,
    ExplanationResponse,
)
from decision_engine.database.recorder import DecisionRecorder, PREDICTION
from decision_engine.models.prediction import PredictionInput, PredictionResult
from decision_engine.signals.scoring.scorer import PredictionScorer

router = APIRouter(prefix="/api/predictions", tags=["Predictions"])


@router.post("", response_model=PredictionResult)
async def create_prediction(
    prediction_input: PredictionInput,
    scorer: PredictionScorer = Depends(get_scorer),
) -> PredictionResult:
    """
    Score an asset and record the decision.

    An empty price history is rejected with 422.
    """
    return await scorer.predict(prediction_input)


@router.post("/explain", response_model=ExplanationResponse)
async def explain_prediction(
    prediction_input: PredictionInput,
    scorer: PredictionScorer = Depends(get_scorer),
) -> ExplanationResponse:
    """Component scores and reasons, without recording anything."""
    return ExplanationResponse(
        symbol=prediction_input.symbol,
        factors=scorer.component_scores(prediction_input).model_dump(),
        reasons=scorer.explain(prediction_input),
    )


@router.get("", response_model=DecisionListResponse)
async def list_predictions(
    symbol: Optional[str] = Query(None, description="Filter by symbol"),
    limit: int = Query(50, ge=1, le=500, description="Max results"),
    recorder: DecisionRecorder = Depends(get_recorder),
) -> DecisionListResponse:
    """Recently recorded predictions, newest first."""
    records = await recorder.get_records(entity_type=PREDICTION, symbol=symbol, limit=limit)
    return DecisionListResponse(
        records=[DecisionRecordResponse(**r) for r in records],
        count=len(records),
    )
