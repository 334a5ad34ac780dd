"""Prometheus metrics for skill-ledger.

Every metric the service exposes is declared here, so this file doubles as
the inventory of what we measure.  Modules import the metric they own and
increment it at the point of action (the ledger counts its own mints, the
middleware counts requests).

Counters only go up; rates come from PromQL, e.g.

    rate(credentials_issued_total[1h])

Labels stay low-cardinality: operation names and error kinds, never
addresses or credential ids.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # Ledger calls are in-memory; anything past 250ms is lock contention
    # or a slow metadata gateway.
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Ledger metrics (incremented in app/services/ledger.py)
# ---------------------------------------------------------------------------

CREDENTIALS_ISSUED = Counter(
    "credentials_issued_total",
    "Credentials minted, single and batch",
    ["mode"],  # "single" or "batch"
)

CREDENTIALS_REVOKED = Counter(
    "credentials_revoked_total",
    "Credentials moved to the revoked state",
)

SOULBOUND_TRANSFER_ATTEMPTS = Counter(
    "soulbound_transfer_attempts_total",
    "Blocked transfer or burn attempts on existing credentials",
    ["operation"],  # "transfer_from", "safe_transfer_from", "burn"
)

LEDGER_FAILURES = Counter(
    "ledger_operation_failures_total",
    "Ledger operations rejected, by operation and error kind",
    ["operation", "kind"],
)

ISSUER_ROLE_CHANGES = Counter(
    "issuer_role_changes_total",
    "Issuer role grants and revocations performed by admins",
    ["action"],  # "grant" or "revoke"
)

# ---------------------------------------------------------------------------
# Metadata loader
# ---------------------------------------------------------------------------

METADATA_FETCHES = Counter(
    "metadata_fetches_total",
    "Off-chain metadata fetches by result",
    ["result"],  # "ok" or "error"
)
