"""Ledger lifecycle events.

Indexers and the UI refresh from these instead of polling every record.
``sequence`` is assigned by the ledger in emission order, starting at 0,
so a consumer can resume with ``events(after=last_seen)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class CredentialIssued:
    name: ClassVar[str] = "CredentialIssued"

    sequence: int
    credential_id: int
    recipient: str
    skill_category: str
    proficiency: int
    issuer: str


@dataclass(frozen=True, slots=True)
class CredentialRevoked:
    name: ClassVar[str] = "CredentialRevoked"

    sequence: int
    credential_id: int
    reason: str


@dataclass(frozen=True, slots=True)
class SoulboundTransferAttempt:
    name: ClassVar[str] = "SoulboundTransferAttempt"

    sequence: int
    credential_id: int
    from_address: str
    to_address: str


LedgerEvent = CredentialIssued | CredentialRevoked | SoulboundTransferAttempt
