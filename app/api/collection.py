"""Collection-level views: display info and the event feed for indexers.

GET /v1/events?after=N returns every event with sequence > N.  An indexer
remembers the last sequence it processed and polls from there; sequences
are dense, so a gap means something was missed.
"""

from __future__ import annotations

import dataclasses
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.api.dependencies import get_ledger
from app.core.config import SETTINGS
from app.services.ledger import CredentialLedger

router = APIRouter(prefix="/v1", tags=["collection"])


class CollectionOut(BaseModel):
    name: str
    symbol: str
    total_supply: int


class EventOut(BaseModel):
    sequence: int
    name: str
    data: dict[str, Any]


@router.get("/collection", response_model=CollectionOut)
def get_collection(
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
) -> CollectionOut:
    return CollectionOut(
        name=SETTINGS.collection_name,
        symbol=SETTINGS.collection_symbol,
        total_supply=ledger.queries.total_supply(),
    )


@router.get("/events", response_model=list[EventOut])
def list_events(
    ledger: Annotated[CredentialLedger, Depends(get_ledger)],
    after: Annotated[int, Query(ge=-1)] = -1,
) -> list[EventOut]:
    out = []
    for event in ledger.events(after=after):
        data = dataclasses.asdict(event)
        data.pop("sequence")
        out.append(EventOut(sequence=event.sequence, name=event.name, data=data))
    return out
