"""Credential endpoints: mint, revoke, look up, and the transfer block.

- POST /v1/credentials                 mint one credential (issuer)
- POST /v1/credentials/batch           mint many, all-or-nothing (issuer)
- POST /v1/credentials/{id}/revoke     revoke once (issuer)
- POST /v1/credentials/{id}/transfer   always rejected: soulbound
- POST /v1/credentials/{id}/burn       always rejected: soulbound
- GET  /v1/credentials/total-supply    number minted so far
- GET  /v1/credentials/{id}            full record (public)
- GET  /v1/credentials/{id}/metadata   fetched off-chain metadata (public)

Proficiency must be a JSON integer (no floats, booleans or numeric
strings); the range is validated by the ledger, so an out-of-range value
surfaces as the ledger's InvalidProficiency error rather than a generic
schema error.
"""

from __future__ import annotations

import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, StrictInt
from starlette.concurrency import run_in_threadpool

from app.api.dependencies import get_http_client, get_ledger, require_user
from app.api.errors import ledger_http_error
from app.core.config import SETTINGS
from app.models.credential import Credential
from app.models.metadata import CredentialMetadata
from app.models.principal import Principal
from app.services import metadata_service
from app.services.errors import LedgerError
from app.services.ledger import CredentialLedger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/credentials", tags=["credentials"])


class CredentialMintIn(BaseModel):
    recipient: str = Field(min_length=1)
    skill_category: str = Field(min_length=1, max_length=64)
    proficiency: StrictInt
    metadata_uri: str


class CredentialMintOut(BaseModel):
    id: int


class CredentialBatchMintIn(BaseModel):
    recipients: list[str]
    skill_categories: list[str]
    proficiencies: list[StrictInt]
    metadata_uris: list[str]


class CredentialBatchMintOut(BaseModel):
    ids: list[int]


class CredentialRevokeIn(BaseModel):
    reason: str = ""


class CredentialTransferIn(BaseModel):
    from_address: str
    to_address: str
    safe: bool = False


class CredentialOut(BaseModel):
    id: int
    owner: str
    skill_category: str
    proficiency: int
    metadata_uri: str
    issuer: str
    issued_at: int
    revoked: bool
    revocation_reason: str | None
    status: str

    @staticmethod
    def from_credential(c: Credential) -> CredentialOut:
        return CredentialOut(
            id=c.id,
            owner=c.owner,
            skill_category=c.skill_category,
            proficiency=c.proficiency,
            metadata_uri=c.metadata_uri,
            issuer=c.issuer,
            issued_at=c.issued_at,
            revoked=c.revoked,
            revocation_reason=c.revocation_reason,
            status=c.status,
        )


class TotalSupplyOut(BaseModel):
    total_supply: int


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=CredentialMintOut,
    status_code=status.HTTP_201_CREATED,
)
def mint_credential(
    body: CredentialMintIn,
    principal: Annotated[Principal, Depends(require_user)],
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> CredentialMintOut:
    try:
        credential_id = ledger.mint_credential(
            principal.address,
            body.recipient,
            body.skill_category,
            body.proficiency,
            body.metadata_uri,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from None
    return CredentialMintOut(id=credential_id)


@router.post(
    "/batch",
    response_model=CredentialBatchMintOut,
    status_code=status.HTTP_201_CREATED,
)
def batch_mint_credentials(
    body: CredentialBatchMintIn,
    principal: Annotated[Principal, Depends(require_user)],
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> CredentialBatchMintOut:
    try:
        ids = ledger.batch_mint_credentials(
            principal.address,
            body.recipients,
            body.skill_categories,
            body.proficiencies,
            body.metadata_uris,
        )
    except LedgerError as e:
        raise ledger_http_error(e) from None
    return CredentialBatchMintOut(ids=ids)


@router.post(
    "/{credential_id}/revoke",
    status_code=status.HTTP_204_NO_CONTENT,
)
def revoke_credential(
    credential_id: int,
    body: CredentialRevokeIn,
    principal: Annotated[Principal, Depends(require_user)],
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> None:
    try:
        ledger.revoke_credential(principal.address, credential_id, body.reason)
    except LedgerError as e:
        raise ledger_http_error(e) from None


@router.post("/{credential_id}/transfer", status_code=status.HTTP_204_NO_CONTENT)
def transfer_credential(
    credential_id: int,
    body: CredentialTransferIn,
    principal: Annotated[Principal, Depends(require_user)],
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> None:
    """Never succeeds.  Exists so wallets and indexers see a proper
    TokenIsSoulbound rejection (and the attempt gets recorded)."""
    transfer = ledger.safe_transfer_from if body.safe else ledger.transfer_from
    try:
        transfer(principal.address, body.from_address, body.to_address, credential_id)
    except LedgerError as e:
        raise ledger_http_error(e) from None


@router.post("/{credential_id}/burn", status_code=status.HTTP_204_NO_CONTENT)
def burn_credential(
    credential_id: int,
    principal: Annotated[Principal, Depends(require_user)],
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> None:
    try:
        ledger.burn(principal.address, credential_id)
    except LedgerError as e:
        raise ledger_http_error(e) from None


# ---------------------------------------------------------------------------
# Reads (public)
# ---------------------------------------------------------------------------


# Declared before /{credential_id} so the literal path wins.
@router.get("/total-supply", response_model=TotalSupplyOut)
def total_supply(
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> TotalSupplyOut:
    return TotalSupplyOut(total_supply=ledger.queries.total_supply())


@router.get("/{credential_id}", response_model=CredentialOut)
def get_credential(
    credential_id: int,
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> CredentialOut:
    try:
        credential = ledger.queries.get_credential(credential_id)
    except LedgerError as e:
        raise ledger_http_error(e) from None
    return CredentialOut.from_credential(credential)


@router.get("/{credential_id}/metadata", response_model=CredentialMetadata)
async def get_credential_metadata(
    credential_id: int,
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
    http_client: Annotated[httpx.AsyncClient | None, Depends(get_http_client)],
) -> CredentialMetadata:
    """Resolve the credential's metadata_uri and return the parsed document.

    502 when the metadata host is unreachable or serves something that
    isn't valid metadata: the credential itself is fine, the upstream
    isn't.
    """
    # token_uri takes the ledger lock; keep it off the event loop.
    try:
        uri = await run_in_threadpool(ledger.queries.token_uri, credential_id)
    except LedgerError as e:
        raise ledger_http_error(e) from None

    try:
        return await metadata_service.fetch_metadata(
            uri,
            gateway=SETTINGS.ipfs_gateway,
            timeout=SETTINGS.metadata_timeout_s,
            client=http_client,
        )
    except metadata_service.MetadataFetchError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "MetadataUnavailable", "message": str(e)},
        ) from None
