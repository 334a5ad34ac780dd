"""Ledger error kinds.

Each class carries a stable ``kind`` string.  Routers map kinds to HTTP
statuses and put the kind in the response body so clients can branch on
it without parsing messages.
"""

from __future__ import annotations


class LedgerError(Exception):
    kind = "LedgerError"


class NotAuthorizedError(LedgerError):
    kind = "NotAuthorized"

    def __init__(self, caller: str, role: str) -> None:
        super().__init__(f"{caller} lacks role {role!r}")
        self.caller = caller
        self.role = role


class InvalidProficiencyError(LedgerError, ValueError):
    kind = "InvalidProficiency"

    def __init__(self, proficiency: object) -> None:
        super().__init__(
            f"proficiency must be an integer between 1 and 5 (got {proficiency!r})"
        )
        self.proficiency = proficiency


class ArrayLengthMismatchError(LedgerError, ValueError):
    kind = "ArrayLengthMismatch"

    def __init__(self, lengths: dict[str, int]) -> None:
        detail = ", ".join(f"{k}={v}" for k, v in lengths.items())
        super().__init__(f"Array length mismatch ({detail})")
        self.lengths = lengths


class TokenNotFoundError(LedgerError, LookupError):
    kind = "TokenNotFound"

    def __init__(self, credential_id: int) -> None:
        super().__init__(f"credential {credential_id} does not exist")
        self.credential_id = credential_id


class TokenAlreadyRevokedError(LedgerError):
    kind = "TokenAlreadyRevoked"

    def __init__(self, credential_id: int) -> None:
        super().__init__(f"credential {credential_id} is already revoked")
        self.credential_id = credential_id


class TokenIsSoulboundError(LedgerError):
    kind = "TokenIsSoulbound"

    def __init__(self, credential_id: int) -> None:
        super().__init__(f"credential {credential_id} is soulbound and cannot move")
        self.credential_id = credential_id
