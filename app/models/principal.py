from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Role = Literal["admin", "issuer"]

ADMIN: Role = "admin"
ISSUER: Role = "issuer"

# The null principal: destination of a burn. Never a valid owner.
ZERO_ADDRESS = "0x" + "0" * 40


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller extracted from a validated JWT.

    Carried through the request via FastAPI's dependency system.
    The token only proves WHO is calling; what the caller may do is
    decided by the ledger's role registry at call time, so a role
    revocation takes effect on the very next request.

        address: subject from JWT (an account address)
    """

    address: str
