"""Issuer role management over HTTP."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tests.conftest import ADMIN_ADDRESS, ISSUER_ADDRESS, OTHER_ADDRESS, auth


def test_admin_grants_issuer(client: TestClient) -> None:
    resp = client.put(f"/admin/issuers/{ISSUER_ADDRESS}", headers=auth(ADMIN_ADDRESS))
    assert resp.status_code == 204
    assert client.get(f"/v1/roles/{ISSUER_ADDRESS}").json() == {
        "address": ISSUER_ADDRESS,
        "admin": False,
        "issuer": True,
    }


def test_grant_is_idempotent(client: TestClient) -> None:
    for _ in range(2):
        resp = client.put(
            f"/admin/issuers/{ISSUER_ADDRESS}", headers=auth(ADMIN_ADDRESS)
        )
        assert resp.status_code == 204
    assert client.get(f"/v1/roles/{ISSUER_ADDRESS}").json()["issuer"] is True


def test_admin_revokes_issuer(client: TestClient) -> None:
    client.put(f"/admin/issuers/{ISSUER_ADDRESS}", headers=auth(ADMIN_ADDRESS))
    resp = client.delete(
        f"/admin/issuers/{ISSUER_ADDRESS}", headers=auth(ADMIN_ADDRESS)
    )
    assert resp.status_code == 204
    assert client.get(f"/v1/roles/{ISSUER_ADDRESS}").json()["issuer"] is False


def test_non_admin_cannot_grant(client: TestClient) -> None:
    resp = client.put(f"/admin/issuers/{ISSUER_ADDRESS}", headers=auth(OTHER_ADDRESS))
    assert resp.status_code == 403
    assert resp.json()["detail"]["error"] == "NotAuthorized"
    assert client.get(f"/v1/roles/{ISSUER_ADDRESS}").json()["issuer"] is False


def test_issuer_cannot_grant_others(client: TestClient) -> None:
    client.put(f"/admin/issuers/{ISSUER_ADDRESS}", headers=auth(ADMIN_ADDRESS))
    resp = client.put(f"/admin/issuers/{OTHER_ADDRESS}", headers=auth(ISSUER_ADDRESS))
    assert resp.status_code == 403


def test_list_issuers(client: TestClient) -> None:
    client.put(f"/admin/issuers/{ISSUER_ADDRESS}", headers=auth(ADMIN_ADDRESS))
    resp = client.get("/admin/issuers", headers=auth(ADMIN_ADDRESS))
    assert resp.status_code == 200
    assert resp.json() == {"issuers": sorted([ADMIN_ADDRESS, ISSUER_ADDRESS])}


def test_bootstrap_admin_roles(client: TestClient) -> None:
    assert client.get(f"/v1/roles/{ADMIN_ADDRESS}").json() == {
        "address": ADMIN_ADDRESS,
        "admin": True,
        "issuer": True,
    }
