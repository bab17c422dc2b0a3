"""
Prometheus Metrics Endpoint.

PURPOSE:
    Expose /metrics endpoint for the Prometheus scraper.

    Test with: curl http://localhost:3000/metrics
"""

from fastapi import APIRouter, Response
from llm_router.observability.metrics import get_metrics_content


router = APIRouter(prefix="/metrics", tags=["observability"])


@router.get("")
async def metrics():
    """Prometheus metrics endpoint in text exposition format."""
    content, content_type = get_metrics_content()
    return Response(content=content, media_type=content_type)
