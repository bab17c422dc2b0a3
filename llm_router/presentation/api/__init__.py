"""
API Routers for FastAPI.

Exports all routers for registration in fastapi_app.py
"""

from llm_router.presentation.api.query import router as query_router
from llm_router.presentation.api.models import router as models_router
from llm_router.presentation.api.metrics import router as metrics_router

__all__ = [
    "query_router",
    "models_router",
    "metrics_router",
]
