from __future__ import annotations

import pytest

from app.services.errors import TokenNotFoundError
from app.services.ledger import CredentialLedger
from tests.conftest import ISSUER_ADDRESS, OTHER_ADDRESS, RECIPIENT_ADDRESS


def _mint(ledger: CredentialLedger, owner: str, category: str, level: int = 3) -> int:
    return ledger.mint_credential(
        ISSUER_ADDRESS, owner, category, level, f"ipfs://{category.lower()}"
    )


def test_empty_ledger(ledger: CredentialLedger) -> None:
    assert ledger.queries.total_supply() == 0
    assert ledger.queries.get_credentials_by_owner(RECIPIENT_ADDRESS) == []
    assert ledger.queries.balance_of(RECIPIENT_ADDRESS) == 0
    assert ledger.queries.skill_summary(RECIPIENT_ADDRESS) == []


def test_credentials_by_owner_in_mint_order(issuer_ledger: CredentialLedger) -> None:
    # ids 0..5 alternate owners so RECIPIENT gets [0, 2, 5]
    for owner in [
        RECIPIENT_ADDRESS,
        OTHER_ADDRESS,
        RECIPIENT_ADDRESS,
        OTHER_ADDRESS,
        OTHER_ADDRESS,
        RECIPIENT_ADDRESS,
    ]:
        _mint(issuer_ledger, owner, "Solidity")

    q = issuer_ledger.queries
    assert q.get_credentials_by_owner(RECIPIENT_ADDRESS) == [0, 2, 5]
    assert q.get_credentials_by_owner(OTHER_ADDRESS) == [1, 3, 4]
    assert q.balance_of(RECIPIENT_ADDRESS) == 3
    assert q.total_supply() == 6


def test_token_uri(issuer_ledger: CredentialLedger) -> None:
    cid = _mint(issuer_ledger, RECIPIENT_ADDRESS, "React")
    assert issuer_ledger.queries.token_uri(cid) == "ipfs://react"


@pytest.mark.parametrize("method", ["get_credential", "owner_of", "token_uri"])
def test_unknown_id_raises(ledger: CredentialLedger, method: str) -> None:
    with pytest.raises(TokenNotFoundError):
        getattr(ledger.queries, method)(0)


def test_skill_summary_counts_active_by_first_appearance(
    issuer_ledger: CredentialLedger,
) -> None:
    _mint(issuer_ledger, RECIPIENT_ADDRESS, "Solidity")
    _mint(issuer_ledger, RECIPIENT_ADDRESS, "React")
    _mint(issuer_ledger, RECIPIENT_ADDRESS, "Solidity")
    revoked = _mint(issuer_ledger, RECIPIENT_ADDRESS, "TypeScript")
    _mint(issuer_ledger, OTHER_ADDRESS, "Python")
    issuer_ledger.revoke_credential(ISSUER_ADDRESS, revoked, "mistake")

    assert issuer_ledger.queries.skill_summary(RECIPIENT_ADDRESS) == [
        ("Solidity", 2),
        ("React", 1),
    ]
