from decision_engine.database.recorder import (
    DecisionRecorder,
    SqlDecisionRecorder,
    InMemoryDecisionRecorder,
    record_safely,
    PREDICTION,
    WEBHOOK_SIGNAL,
)

__all__ = [
    "DecisionRecorder",
    "SqlDecisionRecorder",
    "InMemoryDecisionRecorder",
    "record_safely",
    "PREDICTION",
    "WEBHOOK_SIGNAL",
]
