"""Per-owner read views: a holder's credential ids and skill portfolio."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.dependencies import get_ledger
from app.services.ledger import CredentialLedger

router = APIRouter(prefix="/v1/owners", tags=["owners"])


class OwnerCredentialsOut(BaseModel):
    owner: str
    balance: int
    credential_ids: list[int]


class SkillCountOut(BaseModel):
    skill_category: str
    count: int


@router.get("/{address}/credentials", response_model=OwnerCredentialsOut)
def get_credentials_by_owner(
    address: str,
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> OwnerCredentialsOut:
    ids = ledger.queries.get_credentials_by_owner(address)
    return OwnerCredentialsOut(owner=address, balance=len(ids), credential_ids=ids)


@router.get("/{address}/skills", response_model=list[SkillCountOut])
def get_skill_summary(
    address: str,
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> list[SkillCountOut]:
    return [
        SkillCountOut(skill_category=category, count=count)
        for category, count in ledger.queries.skill_summary(address)
    ]
