from __future__ import annotations

from dataclasses import replace
from typing import Protocol

from app.models.credential import Credential, is_valid_proficiency
from app.services.errors import (
    InvalidProficiencyError,
    TokenAlreadyRevokedError,
    TokenNotFoundError,
)


class CredentialStore(Protocol):
    def allocate(
        self,
        owner: str,
        skill_category: str,
        proficiency: int,
        metadata_uri: str,
        issuer: str,
        now: int,
    ) -> int: ...
    def get(self, credential_id: int) -> Credential: ...
    def set_revoked(self, credential_id: int, reason: str) -> Credential: ...
    def owner_of(self, credential_id: int) -> str: ...
    def ids_by_owner(self, owner: str) -> list[int]: ...
    def total_count(self) -> int: ...


class InMemoryCredentialStore:
    """Credential records plus the owner -> ids index.

    Ids are list positions: the next id is always len(self._records),
    which keeps them dense and monotonic.  No authorization here; the
    ledger owns that.
    """

    def __init__(self) -> None:
        self._records: list[Credential] = []
        self._by_owner: dict[str, list[int]] = {}

    def allocate(
        self,
        owner: str,
        skill_category: str,
        proficiency: int,
        metadata_uri: str,
        issuer: str,
        now: int,
    ) -> int:
        if not is_valid_proficiency(proficiency):
            raise InvalidProficiencyError(proficiency)

        credential = Credential.new(
            id=len(self._records),
            owner=owner,
            skill_category=skill_category,
            proficiency=proficiency,
            metadata_uri=metadata_uri,
            issuer=issuer,
            issued_at=now,
        )
        self._records.append(credential)
        self._by_owner.setdefault(owner, []).append(credential.id)
        return credential.id

    def get(self, credential_id: int) -> Credential:
        if not 0 <= credential_id < len(self._records):
            raise TokenNotFoundError(credential_id)
        return self._records[credential_id]

    def set_revoked(self, credential_id: int, reason: str) -> Credential:
        existing = self.get(credential_id)
        if existing.revoked:
            raise TokenAlreadyRevokedError(credential_id)

        updated = replace(existing, revoked=True, revocation_reason=reason)
        self._records[credential_id] = updated
        return updated

    def owner_of(self, credential_id: int) -> str:
        return self.get(credential_id).owner

    def ids_by_owner(self, owner: str) -> list[int]:
        # Copy so callers can't reach into the index.
        return list(self._by_owner.get(owner, ()))

    def total_count(self) -> int:
        return len(self._records)
