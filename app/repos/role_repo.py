from __future__ import annotations

import logging
from typing import Protocol

from app.models.principal import ADMIN, ISSUER, Role
from app.services.errors import NotAuthorizedError

logger = logging.getLogger(__name__)


class RoleRegistry(Protocol):
    def has_role(self, principal: str, role: Role) -> bool: ...
    def grant_issuer(self, caller: str, target: str) -> bool: ...
    def revoke_issuer(self, caller: str, target: str) -> bool: ...
    def members(self, role: Role) -> list[str]: ...


class InMemoryRoleRegistry:
    """Admin and issuer membership sets.

    The bootstrap admin is granted both roles at construction, so the
    admin set is never empty.  There is deliberately no way to add or
    remove admins after that.
    """

    def __init__(self, bootstrap_admin: str) -> None:
        if not bootstrap_admin:
            raise ValueError("bootstrap admin must be non-empty")
        self._members: dict[Role, set[str]] = {
            ADMIN: {bootstrap_admin},
            ISSUER: {bootstrap_admin},
        }

    def has_role(self, principal: str, role: Role) -> bool:
        return principal in self._members.get(role, set())

    def _require_admin(self, caller: str) -> None:
        if not self.has_role(caller, ADMIN):
            raise NotAuthorizedError(caller, ADMIN)

    def grant_issuer(self, caller: str, target: str) -> bool:
        """Returns True if the role was newly granted (False = already held)."""
        self._require_admin(caller)
        issuers = self._members[ISSUER]
        if target in issuers:
            return False
        issuers.add(target)
        return True

    def revoke_issuer(self, caller: str, target: str) -> bool:
        """Returns True if the role was actually removed."""
        self._require_admin(caller)
        issuers = self._members[ISSUER]
        if target not in issuers:
            return False
        issuers.discard(target)
        return True

    def members(self, role: Role) -> list[str]:
        return sorted(self._members.get(role, set()))
