"""Health and readiness endpoints.

  /health (liveness): "is the process alive?"  If the ledger answers a
    read, it is.  Includes a small summary for dashboards.

  /ready (readiness): "can this instance take traffic?"  The ledger is
    in-process with no external dependencies, so readiness only needs
    the ledger to have been built.  The metadata gateway is deliberately
    not checked: it only affects the /metadata view, never minting.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request) -> dict:
    ledger = getattr(request.app.state, "ledger", None)
    if ledger is None:
        return {"status": "degraded", "checks": {"ledger": "not_initialized"}}

    return {
        "status": "ok",
        "checks": {"ledger": "ok"},
        "total_supply": ledger.queries.total_supply(),
    }


@router.get("/ready")
def ready(request: Request) -> Response:
    if getattr(request.app.state, "ledger", None) is None:
        return Response(status_code=503)
    return Response(status_code=200)
