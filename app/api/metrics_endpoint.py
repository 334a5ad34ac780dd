"""Prometheus scrape endpoint.

Returns the text exposition format (not JSON): HTTP request metrics plus
the ledger counters declared in app/core/metrics.py, e.g.

  credentials_issued_total{mode="single"} 12.0
  soulbound_transfer_attempts_total{operation="transfer_from"} 3.0

Restrict access in production (internal port or scraper IP allow-list);
failure counters by kind reveal who is probing the ledger.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
