from __future__ import annotations

import threading

from app.models.credential import Credential
from app.repos.credential_repo import CredentialStore


class CredentialQueryService:
    """Read-only views over the credential store.

    Shares the ledger's lock so a read sees the state before or after a
    mutation, never halfway through a batch.
    """

    def __init__(self, store: CredentialStore, lock: threading.RLock) -> None:
        self._store = store
        self._lock = lock

    def get_credential(self, credential_id: int) -> Credential:
        with self._lock:
            return self._store.get(credential_id)

    def get_credentials_by_owner(self, owner: str) -> list[int]:
        with self._lock:
            return self._store.ids_by_owner(owner)

    def total_supply(self) -> int:
        with self._lock:
            return self._store.total_count()

    def owner_of(self, credential_id: int) -> str:
        with self._lock:
            return self._store.owner_of(credential_id)

    def balance_of(self, owner: str) -> int:
        with self._lock:
            return len(self._store.ids_by_owner(owner))

    def token_uri(self, credential_id: int) -> str:
        with self._lock:
            return self._store.get(credential_id).metadata_uri

    def skill_summary(self, owner: str) -> list[tuple[str, int]]:
        """(skill_category, count) over the owner's active credentials.

        Ordered by first appearance so the portfolio grid is stable.
        Revoked credentials don't count toward a skill.
        """
        with self._lock:
            credentials = [
                self._store.get(cid) for cid in self._store.ids_by_owner(owner)
            ]

        counts: dict[str, int] = {}
        for credential in credentials:
            if credential.revoked:
                continue
            counts[credential.skill_category] = (
                counts.get(credential.skill_category, 0) + 1
            )
        return list(counts.items())
