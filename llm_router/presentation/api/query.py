"""
Query API Router - run a message through selection and invocation over HTTP.

Flow:
  HTTP Request → Router → ModelInvoker → (ModelSelector) → backend
                                  ↓
  HTTP Response (JSON or streamed text) ←

Domain errors are mapped to status codes by the handlers in fastapi_app.py.
"""

from logging import getLogger
from typing import Optional

from dishka.integrations.fastapi import FromDishka, inject
from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from llm_router.services.model_invoker import ModelInvoker

logger = getLogger(__name__)


# ==================== REQUEST/RESPONSE MODELS ====================


class QueryRequest(BaseModel):
    """
    Request body:
    {"text": "...", "model": "gpt4" or null}

    A non-null model skips selection and must be a registered id.
    """

    text: str
    model: Optional[str] = None


class QueryResponse(BaseModel):
    reply: str


# ==================== ROUTER ====================

router = APIRouter(prefix="/query", tags=["query"])


def _require_text(request: QueryRequest) -> None:
    if not request.text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Empty query text",
        )


@router.post("", response_model=QueryResponse)
@inject
async def run_query(
    request: QueryRequest,
    invoker: FromDishka[ModelInvoker],
):
    """Return the full reply of the selected (or forced) model."""
    _require_text(request)
    reply = await invoker.run_query(request.text, force_model=request.model)
    return QueryResponse(reply=reply)


@router.post("/stream")
@inject
async def stream_query(
    request: QueryRequest,
    invoker: FromDishka[ModelInvoker],
):
    """
    Stream the reply as plain text fragments.

    The model is resolved before the response starts, so an unknown forced
    model is still a 400. The chosen model is reported in X-Model-Id.
    """
    _require_text(request)
    stream = await invoker.stream_query(request.text, force_model=request.model)
    logger.debug("Streaming reply from %s", stream.model_id)
    return StreamingResponse(
        stream,
        media_type="text/plain; charset=utf-8",
        headers={"X-Model-Id": stream.model_id},
    )
