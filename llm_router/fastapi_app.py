"""
FastAPI Application Factory.
Creates and configures the FastAPI application with all routers, middleware, and DI.

Endpoints:
- slack webhooks, query, models, metrics, health
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from llm_router.adapters.slack.slack_routes import DispatchedEvents
from llm_router.adapters.slack.slack_routes import router as slack_router
from llm_router.config.logging_config import (
    NO_CORRELATION_ID,
    correlation_id_var,
    setup_logging,
)
from llm_router.config.settings import get_config
from llm_router.domain.exceptions import (
    DomainValidationError,
    InvocationError,
    SelectionError,
    UnknownModelError,
)
from llm_router.presentation.api import metrics_router, models_router, query_router
from llm_router.services.model_invoker import ModelInvoker
from llm_router.setup.ioc.container import create_container

logger = logging.getLogger(__name__)


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and set correlation ID from request headers."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", NO_CORRELATION_ID)

        # Set in contextvars (propagates to async tasks and logging)
        correlation_id_var.set(correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


def create_fastapi_app(
    container: Optional[AsyncContainer] = None, warm_up: bool = True
) -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Args:
        container: Dishka container; defaults to one built from Config
        warm_up: Resolve the model pipeline at startup so invalid
            configuration stops the process before it serves traffic

    Returns:
        FastAPI application instance
    """
    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if warm_up:
            await container.get(ModelInvoker)
        logger.info("FastAPI application started. DI container initialized.")
        yield
        await container.close()
        logger.info("FastAPI application shutdown. DI container closed.")

    app = FastAPI(
        title="LLM Slack Router",
        description="Routes chat messages to the best-fitting LLM backend",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Dishka adds middleware, which must happen before app starts
    setup_dishka(container, app)

    app.add_middleware(CorrelationIdMiddleware)

    # One answer per Slack message, however many event types announce it
    app.state.slack_dispatched_events = DispatchedEvents()

    @app.exception_handler(UnknownModelError)
    async def unknown_model_handler(request: Request, exc: UnknownModelError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(DomainValidationError)
    async def validation_handler(request: Request, exc: DomainValidationError):
        return JSONResponse(status_code=422, content={"error": exc.message})

    @app.exception_handler(SelectionError)
    @app.exception_handler(InvocationError)
    async def upstream_handler(request: Request, exc: Exception):
        logger.error("[UPSTREAM ERROR] %s: %s", type(exc).__name__, exc)
        return JSONResponse(
            status_code=502,
            content={"error": "The language model could not produce a reply"},
        )

    @app.get("/", tags=["health"])
    async def root():
        return {"message": "FastAPI server is running."}

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "healthy"}

    app.include_router(slack_router)  # POST /slack/events
    app.include_router(query_router)  # POST /query, POST /query/stream
    app.include_router(models_router)  # GET /models
    app.include_router(metrics_router)  # GET /metrics

    return app


def create_default_app() -> FastAPI:
    """Uvicorn factory: configure logging for APP_ENV, then build the app."""
    config = get_config()
    setup_logging(config.LOG_LEVEL, config.LOG_PATH or None)
    return create_fastapi_app(container=create_container(config))
