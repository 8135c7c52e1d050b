"""
FastAPI application for the decision engine.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from decision_engine import __version__
from decision_engine.api.dependencies import app_state
from decision_engine.api.routes import (
    predictions_router,
    signals_router,
    system_router,
)
from decision_engine.config.settings import Config
from decision_engine.database.recorder import SqlDecisionRecorder
from decision_engine.exceptions import CollaboratorError, InputError, ValidationError
from decision_engine.logging import setup_logging

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Signal Decision Engine API",
    description="Scores assets into trading recommendations and accepts external signals",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(predictions_router)
app.include_router(signals_router)
app.include_router(system_router)


# ============ Error Mapping ============

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.reason})


@app.exception_handler(InputError)
async def input_error_handler(request: Request, exc: InputError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(CollaboratorError)
async def collaborator_error_handler(request: Request, exc: CollaboratorError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# ============ Startup/Shutdown ============

@app.on_event("startup")
async def startup_event():
    """Initialize application state on startup."""
    if not app_state.initialized:
        config = Config()
        setup_logging(config)
        app_state.initialize(config)

    if isinstance(app_state.recorder, SqlDecisionRecorder):
        try:
            await app_state.recorder.connect()
        except CollaboratorError as e:
            # Scoring and intake still work, records are dropped with a warning
            logger.error(f"Decision store unavailable: {e}")

    logger.info(f"Decision engine API started (env={app_state.config.env})")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    for owner in (app_state.scorer, app_state.pipeline):
        if owner is not None:
            await owner.notifications.drain()
    if isinstance(app_state.recorder, SqlDecisionRecorder):
        await app_state.recorder.disconnect()
    if app_state.notifier and app_state.notifier.webhook:
        await app_state.notifier.webhook.close()
    logger.info("Decision engine API shutting down")


# ============ Root ============

@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Signal Decision Engine API",
        "version": __version__,
        "docs": "/docs",
    }


# ============ Run Server ============

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
