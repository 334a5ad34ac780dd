"""Prometheus metrics middleware: instruments every HTTP request.

For each request:
  1. ACTIVE_REQUESTS goes up for the duration of the request
  2. On completion REQUEST_COUNT is incremented (method/endpoint/status)
     and the duration lands in REQUEST_DURATION

ENDPOINT LABEL
----------------
Most ledger paths embed an address or credential id:

  /v1/owners/0xabc.../credentials
  /v1/credentials/17/revoke

Labelling by raw path would create one time series per address, which
is how Prometheus servers run out of memory.  We label by the matched
route template instead (``/v1/owners/{address}/credentials``), read from
the ASGI scope after routing.  Requests that match no route share one
``<unmatched>`` label.
"""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.core.metrics import ACTIVE_REQUESTS, REQUEST_COUNT, REQUEST_DURATION

_UNMATCHED = "<unmatched>"


def _endpoint_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", _UNMATCHED)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Collect Prometheus metrics for every HTTP request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # Skip the scrape endpoint so Prometheus doesn't count itself.
        if request.url.path == "/metrics":
            return await call_next(request)

        ACTIVE_REQUESTS.inc()
        start = time.monotonic()
        status_code: str | None = None

        try:
            response = await call_next(request)
            status_code = str(response.status_code)
        except Exception:
            # Unhandled handler errors become a 500; record that, then re-raise.
            status_code = "500"
            raise
        finally:
            duration = time.monotonic() - start
            ACTIVE_REQUESTS.dec()
            endpoint = _endpoint_label(request)
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code if status_code is not None else "500",
            ).inc()
            REQUEST_DURATION.labels(
                method=request.method,
                endpoint=endpoint,
            ).observe(duration)

        return response
