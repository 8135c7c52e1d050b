"""
API routes module.
"""
from .predictions import router as predictions_router
from .signals import router as signals_router
from .system import router as system_router

__all__ = [
    "predictions_router",
    "signals_router",
    "system_router",
]
