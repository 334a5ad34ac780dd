"""Request context middleware: assigns a unique ID to every request.

Ledger log lines from concurrent requests interleave.  A request ID on
every line lets you pull out exactly what one mint or revoke did:

  INFO     [req-abc] Credential minted id=4 ...
  WARNING  [req-xyz] revoke_credential rejected ...

The ID lives in a ContextVar, not a thread-local: async handlers share
threads, and sync handlers run in a thread pool that copies the context
in, so the ID follows the request either way.

Clients may supply X-Request-ID (e.g. the UI correlating a toast with a
server log line); otherwise we generate one.  It is echoed back on the
response.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class _RequestContextFilter(logging.Filter):
    """Copies the current request ID onto every LogRecord.

    A filter rather than a formatter, because formatters can only read
    fields that already exist on the record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("-")  # type: ignore[attr-defined]
        return True


# Install once on the root logger, even across module reloads.
root_logger = logging.getLogger()
if not any(isinstance(f, _RequestContextFilter) for f in root_logger.filters):
    root_logger.addFilter(_RequestContextFilter())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, time the request, log one summary line."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        req_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_var.set(req_id)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        logger.info(
            "%s %s → %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response
