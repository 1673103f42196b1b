"""
Prometheus metrics endpoint.

Example:
    GET /metrics

    Response:
        # HELP apartment_listing_searches_total Total listing search requests served
        # TYPE apartment_listing_searches_total counter
        apartment_listing_searches_total{audience="public"} 42.0
        ...
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", response_class=Response)
async def metrics() -> Any:
    """Expose all registered metrics in the Prometheus text format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
