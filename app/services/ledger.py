"""Credential ledger: the single write path for soulbound skill credentials.

Every state change goes through CredentialLedger.  It checks the caller's
role in the registry, validates input, mutates the store and emits an
event, all while holding one lock:

    caller ──► role check ──► validate ──► store mutation ──► events
               (registry)                  (credential store)

An operation either completes fully (state changed, events emitted) or
raises one LedgerError and leaves state untouched.  The one deliberate
exception is a blocked transfer: the SoulboundTransferAttempt event is
recorded before TokenIsSoulboundError is raised, so attempted transfers
show up in telemetry.

FastAPI runs sync endpoints on a thread pool, so the lock is what turns
concurrent requests into a total order.  It is re-entrant because the
query service shares it.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any, NoReturn

from app.core.metrics import (
    CREDENTIALS_ISSUED,
    CREDENTIALS_REVOKED,
    ISSUER_ROLE_CHANGES,
    LEDGER_FAILURES,
    SOULBOUND_TRANSFER_ATTEMPTS,
)
from app.models.credential import is_valid_proficiency
from app.models.events import (
    CredentialIssued,
    CredentialRevoked,
    LedgerEvent,
    SoulboundTransferAttempt,
)
from app.models.principal import ISSUER, ZERO_ADDRESS, Role
from app.repos.credential_repo import CredentialStore, InMemoryCredentialStore
from app.repos.role_repo import InMemoryRoleRegistry, RoleRegistry
from app.services.errors import (
    ArrayLengthMismatchError,
    InvalidProficiencyError,
    LedgerError,
    NotAuthorizedError,
    TokenIsSoulboundError,
)
from app.services.query_service import CredentialQueryService

logger = logging.getLogger(__name__)

Clock = Callable[[], int]
EventListener = Callable[[LedgerEvent], None]


def _now() -> int:
    return int(time.time())


class CredentialLedger:
    def __init__(
        self,
        roles: RoleRegistry,
        store: CredentialStore,
        *,
        clock: Clock = _now,
    ) -> None:
        self._roles = roles
        self._store = store
        self._clock = clock
        self._lock = threading.RLock()
        self._events: list[LedgerEvent] = []
        self._listeners: list[EventListener] = []
        self.queries = CredentialQueryService(store, self._lock)

    @classmethod
    def create(cls, bootstrap_admin: str, *, clock: Clock = _now) -> CredentialLedger:
        """Build a ledger backed by in-memory registry and store."""
        return cls(
            InMemoryRoleRegistry(bootstrap_admin),
            InMemoryCredentialStore(),
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @contextmanager
    def _operation(self, name: str, caller: str) -> Iterator[None]:
        with self._lock:
            try:
                yield
            except LedgerError as e:
                LEDGER_FAILURES.labels(operation=name, kind=e.kind).inc()
                logger.warning(
                    "%s rejected for caller=%s: %s",
                    name,
                    caller,
                    e,
                    extra={"caller": caller, "kind": e.kind},
                )
                raise

    def _require_role(self, caller: str, role: Role) -> None:
        if not self._roles.has_role(caller, role):
            raise NotAuthorizedError(caller, role)

    def _emit(self, event_type: type[Any], **fields: Any) -> LedgerEvent:
        event = event_type(sequence=len(self._events), **fields)
        self._events.append(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                # A broken indexer must not undo a committed mint.
                logger.exception(
                    "Event listener %r failed on %s seq=%d",
                    listener,
                    event.name,
                    event.sequence,
                )
        return event

    def _block_transfer(
        self,
        operation: str,
        caller: str,
        from_address: str,
        to_address: str,
        credential_id: int,
    ) -> NoReturn:
        # Existence check comes first: unknown ids are TokenNotFound.
        self._store.get(credential_id)
        self._emit(
            SoulboundTransferAttempt,
            credential_id=credential_id,
            from_address=from_address,
            to_address=to_address,
        )
        SOULBOUND_TRANSFER_ATTEMPTS.labels(operation=operation).inc()
        logger.warning(
            "Soulbound transfer blocked id=%d from=%s to=%s by=%s",
            credential_id,
            from_address,
            to_address,
            caller,
            extra={"caller": caller, "credential_id": credential_id},
        )
        raise TokenIsSoulboundError(credential_id)

    # ------------------------------------------------------------------
    # Minting
    # ------------------------------------------------------------------

    def mint_credential(
        self,
        caller: str,
        recipient: str,
        skill_category: str,
        proficiency: int,
        metadata_uri: str,
    ) -> int:
        with self._operation("mint_credential", caller):
            self._require_role(caller, ISSUER)
            credential_id = self._store.allocate(
                recipient,
                skill_category,
                proficiency,
                metadata_uri,
                caller,
                self._clock(),
            )
            self._emit(
                CredentialIssued,
                credential_id=credential_id,
                recipient=recipient,
                skill_category=skill_category,
                proficiency=proficiency,
                issuer=caller,
            )
            CREDENTIALS_ISSUED.labels(mode="single").inc()
            logger.info(
                "Credential minted id=%d to=%s skill=%s level=%d by=%s",
                credential_id,
                recipient,
                skill_category,
                proficiency,
                caller,
                extra={"caller": caller, "credential_id": credential_id},
            )
            return credential_id

    def batch_mint_credentials(
        self,
        caller: str,
        recipients: Sequence[str],
        skill_categories: Sequence[str],
        proficiencies: Sequence[int],
        metadata_uris: Sequence[str],
    ) -> list[int]:
        """Mint one credential per position across the four sequences.

        All-or-nothing: lengths and every proficiency are checked before
        the first allocation, so a bad element leaves no partial batch.
        """
        with self._operation("batch_mint_credentials", caller):
            self._require_role(caller, ISSUER)

            lengths = {
                "recipients": len(recipients),
                "skill_categories": len(skill_categories),
                "proficiencies": len(proficiencies),
                "metadata_uris": len(metadata_uris),
            }
            if len(set(lengths.values())) > 1:
                raise ArrayLengthMismatchError(lengths)

            for proficiency in proficiencies:
                if not is_valid_proficiency(proficiency):
                    raise InvalidProficiencyError(proficiency)

            now = self._clock()
            rows = list(zip(recipients, skill_categories, proficiencies, metadata_uris))
            ids = [
                self._store.allocate(recipient, category, proficiency, uri, caller, now)
                for recipient, category, proficiency, uri in rows
            ]
            for credential_id, (recipient, category, proficiency, _uri) in zip(
                ids, rows
            ):
                self._emit(
                    CredentialIssued,
                    credential_id=credential_id,
                    recipient=recipient,
                    skill_category=category,
                    proficiency=proficiency,
                    issuer=caller,
                )
            CREDENTIALS_ISSUED.labels(mode="batch").inc(len(ids))
            logger.info(
                "Batch minted %d credentials by=%s ids=%s",
                len(ids),
                caller,
                ids,
                extra={"caller": caller},
            )
            return ids

    # ------------------------------------------------------------------
    # Transfer block
    # ------------------------------------------------------------------

    def transfer_from(
        self,
        caller: str,
        from_address: str,
        to_address: str,
        credential_id: int,
    ) -> NoReturn:
        with self._operation("transfer_from", caller):
            self._block_transfer(
                "transfer_from", caller, from_address, to_address, credential_id
            )

    def safe_transfer_from(
        self,
        caller: str,
        from_address: str,
        to_address: str,
        credential_id: int,
    ) -> NoReturn:
        with self._operation("safe_transfer_from", caller):
            self._block_transfer(
                "safe_transfer_from", caller, from_address, to_address, credential_id
            )

    def burn(self, caller: str, credential_id: int) -> NoReturn:
        with self._operation("burn", caller):
            owner = self._store.owner_of(credential_id)
            self._block_transfer("burn", caller, owner, ZERO_ADDRESS, credential_id)

    # ------------------------------------------------------------------
    # Revocation
    # ------------------------------------------------------------------

    def revoke_credential(self, caller: str, credential_id: int, reason: str) -> None:
        # Any issuer may revoke any credential, not only ones they minted.
        with self._operation("revoke_credential", caller):
            self._require_role(caller, ISSUER)
            self._store.set_revoked(credential_id, reason)
            self._emit(CredentialRevoked, credential_id=credential_id, reason=reason)
            CREDENTIALS_REVOKED.inc()
            logger.info(
                "Credential revoked id=%d by=%s reason=%r",
                credential_id,
                caller,
                reason,
                extra={"caller": caller, "credential_id": credential_id},
            )

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def grant_issuer_role(self, caller: str, target: str) -> None:
        with self._operation("grant_issuer_role", caller):
            changed = self._roles.grant_issuer(caller, target)
            if changed:
                ISSUER_ROLE_CHANGES.labels(action="grant").inc()
            logger.info(
                "Issuer role granted to=%s by=%s%s",
                target,
                caller,
                "" if changed else " (already held)",
                extra={"caller": caller},
            )

    def revoke_issuer_role(self, caller: str, target: str) -> None:
        with self._operation("revoke_issuer_role", caller):
            changed = self._roles.revoke_issuer(caller, target)
            if changed:
                ISSUER_ROLE_CHANGES.labels(action="revoke").inc()
            logger.info(
                "Issuer role revoked from=%s by=%s%s",
                target,
                caller,
                "" if changed else " (not held)",
                extra={"caller": caller},
            )

    def has_role(self, principal: str, role: Role) -> bool:
        with self._lock:
            return self._roles.has_role(principal, role)

    def role_members(self, role: Role) -> list[str]:
        with self._lock:
            return self._roles.members(role)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def subscribe(self, listener: EventListener) -> None:
        """Call ``listener`` synchronously for every event from now on."""
        with self._lock:
            self._listeners.append(listener)

    def events(self, after: int = -1) -> list[LedgerEvent]:
        """Events with sequence > ``after``, oldest first."""
        with self._lock:
            return self._events[max(after + 1, 0) :]
