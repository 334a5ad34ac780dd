from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure repo root is on sys.path so `import app` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.main import app  # noqa: E402
from app.services import token_service  # noqa: E402
from app.services.ledger import CredentialLedger  # noqa: E402

ADMIN_ADDRESS = "0xa11ce00000000000000000000000000000000001"
ISSUER_ADDRESS = "0x1550e00000000000000000000000000000000002"
RECIPIENT_ADDRESS = "0x4ec1e00000000000000000000000000000000003"
OTHER_ADDRESS = "0x07e4e00000000000000000000000000000000004"

FIXED_NOW = 1739600000


@pytest.fixture(autouse=True)
def ledger() -> CredentialLedger:
    """Fresh ledger per test, installed where the routers look for it."""
    fresh = CredentialLedger.create(ADMIN_ADDRESS, clock=lambda: FIXED_NOW)
    app.state.ledger = fresh
    app.state.http_client = None
    return fresh


@pytest.fixture
def issuer_ledger(ledger: CredentialLedger) -> CredentialLedger:
    """Ledger where ISSUER_ADDRESS already holds the issuer role."""
    ledger.grant_issuer_role(ADMIN_ADDRESS, ISSUER_ADDRESS)
    return ledger


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def mint_token(address: str = RECIPIENT_ADDRESS) -> str:
    """Create a valid ES256 JWT whose subject is ``address``."""
    return token_service.create_access_token(sub=address)


def auth(address: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {mint_token(address)}"}
