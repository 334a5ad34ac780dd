"""ASGI entry point.

  uvicorn app.main:app --host 0.0.0.0 --port 8000

or, once installed, the `skill-ledger` console script, which serves on
SETTINGS.port.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.admin import router as admin_router
from app.api.collection import router as collection_router
from app.api.credentials import router as credentials_router
from app.api.health import router as health_router
from app.api.metrics_endpoint import router as metrics_router
from app.api.owners import router as owners_router
from app.core.config import SETTINGS
from app.core.logging import setup_logging
from app.middleware.metrics import MetricsMiddleware
from app.middleware.request_context import RequestContextMiddleware
from app.services.ledger import CredentialLedger

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app_: FastAPI) -> AsyncGenerator[None, None]:
    # One pooled client for metadata fetches, closed on shutdown.
    async with httpx.AsyncClient(
        timeout=SETTINGS.metadata_timeout_s,
        follow_redirects=True,
    ) as client:
        app_.state.http_client = client
        yield
    app_.state.http_client = None


app = FastAPI(
    title="skill-ledger",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

# The ledger is built exactly once and handed to routers via
# app.api.dependencies.get_ledger; nothing else holds ledger state.
app.state.ledger = CredentialLedger.create(SETTINGS.bootstrap_admin)
app.state.http_client = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware execution order: last-added runs first (outermost layer).
# RequestContext (outermost) → Metrics → CORS → route handler
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(metrics_router)
app.include_router(admin_router)
app.include_router(collection_router)
app.include_router(credentials_router)
app.include_router(health_router)
app.include_router(owners_router)

logger.info(
    "skill-ledger started  env=%s log_level=%s port=%d docs=%s admin=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "on" if SETTINGS.is_dev else "off",
    SETTINGS.bootstrap_admin,
)


def run() -> None:
    uvicorn.run("app.main:app", host="0.0.0.0", port=SETTINGS.port)


if __name__ == "__main__":
    run()
