from __future__ import annotations

from dataclasses import dataclass

MIN_PROFICIENCY = 1
MAX_PROFICIENCY = 5


@dataclass(frozen=True, slots=True)
class Credential:
    """Issued skill credential, bound to its owner for good.

    Everything except the revocation fields is fixed at mint time.
    """

    id: int
    owner: str
    skill_category: str
    proficiency: int  # 1..5
    metadata_uri: str
    issuer: str
    issued_at: int  # epoch seconds
    revoked: bool = False
    revocation_reason: str | None = None

    @property
    def status(self) -> str:
        return "revoked" if self.revoked else "active"

    @staticmethod
    def new(
        *,
        id: int,
        owner: str,
        skill_category: str,
        proficiency: int,
        metadata_uri: str,
        issuer: str,
        issued_at: int,
    ) -> Credential:
        return Credential(
            id=id,
            owner=owner,
            skill_category=skill_category,
            proficiency=proficiency,
            metadata_uri=metadata_uri,
            issuer=issuer,
            issued_at=issued_at,
        )


def is_valid_proficiency(value: object) -> bool:
    # bool is an int subclass; True must not pass as level 1.
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return MIN_PROFICIENCY <= value <= MAX_PROFICIENCY
