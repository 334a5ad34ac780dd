"""Issuer role management.

- PUT    /admin/issuers/{address}  grant issuer (admin)
- DELETE /admin/issuers/{address}  revoke issuer (admin)
- GET    /admin/issuers            list issuers (admin)
- GET    /v1/roles/{address}       which roles an address holds (public)

Grant and revoke are idempotent: granting a current issuer or revoking a
non-issuer still answers 204.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from app.api.dependencies import get_ledger, require_role, require_user
from app.api.errors import ledger_http_error
from app.models.principal import ADMIN, ISSUER, Principal
from app.services.errors import LedgerError
from app.services.ledger import CredentialLedger

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


class IssuersOut(BaseModel):
    issuers: list[str]


class RolesOut(BaseModel):
    address: str
    admin: bool
    issuer: bool


@router.put("/admin/issuers/{address}", status_code=status.HTTP_204_NO_CONTENT)
def grant_issuer_role(
    address: str,
    principal: Annotated[Principal, Depends(require_user)],
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> None:
    try:
        ledger.grant_issuer_role(principal.address, address)
    except LedgerError as e:
        raise ledger_http_error(e) from None


@router.delete("/admin/issuers/{address}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_issuer_role(
    address: str,
    principal: Annotated[Principal, Depends(require_user)],
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> None:
    try:
        ledger.revoke_issuer_role(principal.address, address)
    except LedgerError as e:
        raise ledger_http_error(e) from None


@router.get("/admin/issuers", response_model=IssuersOut)
def list_issuers(
    principal: Annotated[Principal, Depends(require_role(ADMIN))],
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> IssuersOut:
    logger.info("Issuer list requested by address=%s", principal.address)
    return IssuersOut(issuers=ledger.role_members(ISSUER))


@router.get("/v1/roles/{address}", response_model=RolesOut)
def get_roles(
    address: str,
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> RolesOut:
    return RolesOut(
        address=address,
        admin=ledger.has_role(address, ADMIN),
        issuer=ledger.has_role(address, ISSUER),
    )
