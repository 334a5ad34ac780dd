"""Metadata loader tests.

The HTTP side is faked with httpx.MockTransport so no network is needed.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from app.services.metadata_service import (
    MetadataFetchError,
    fetch_metadata,
    resolve_uri,
)

GATEWAY = "https://gw.example/ipfs/"

_DOC = {
    "name": "React Proficiency",
    "description": "Level 5 React credential",
    "image": "ipfs://img/react.png",
    "attributes": [
        {"trait_type": "Skill", "value": "React"},
        {"trait_type": "Proficiency", "value": 5},
    ],
}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _fetch(uri: str, handler) -> object:
    async def _run():
        async with _client(handler) as client:
            return await fetch_metadata(uri, gateway=GATEWAY, timeout=1.0, client=client)

    return asyncio.run(_run())


# ---- resolve_uri ----


@pytest.mark.parametrize(
    "uri,expected",
    [
        ("ipfs://QmCid/meta.json", "https://gw.example/ipfs/QmCid/meta.json"),
        ("ipfs://ipfs/QmCid", "https://gw.example/ipfs/QmCid"),
        ("https://host/meta.json", "https://host/meta.json"),
        ("http://host/meta.json", "http://host/meta.json"),
    ],
)
def test_resolve_uri(uri: str, expected: str) -> None:
    assert resolve_uri(uri, GATEWAY) == expected


@pytest.mark.parametrize("uri", ["ftp://host/x", "ipfs://", "not a uri", ""])
def test_resolve_uri_rejects_unsupported(uri: str) -> None:
    with pytest.raises(MetadataFetchError):
        resolve_uri(uri, GATEWAY)


# ---- fetch_metadata ----


def test_fetch_parses_document() -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, json=_DOC)

    metadata = _fetch("ipfs://QmCid/react.json", handler)
    assert requested == ["https://gw.example/ipfs/QmCid/react.json"]
    assert metadata.name == "React Proficiency"
    assert [a.trait_type for a in metadata.attributes] == ["Skill", "Proficiency"]
    assert metadata.attributes[1].value == 5


def test_fetch_tolerates_missing_optional_fields() -> None:
    metadata = _fetch(
        "https://host/m.json", lambda r: httpx.Response(200, json={"name": "Bare"})
    )
    assert metadata.name == "Bare"
    assert metadata.attributes == []


def test_fetch_non_2xx_raises() -> None:
    with pytest.raises(MetadataFetchError, match="404"):
        _fetch("https://host/missing.json", lambda r: httpx.Response(404))


def test_fetch_invalid_json_raises() -> None:
    with pytest.raises(MetadataFetchError):
        _fetch("https://host/m.json", lambda r: httpx.Response(200, text="<html>"))


def test_fetch_wrong_shape_raises() -> None:
    with pytest.raises(MetadataFetchError):
        _fetch(
            "https://host/m.json",
            lambda r: httpx.Response(200, json={"attributes": "nope"}),
        )


def test_fetch_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(MetadataFetchError, match="could not reach"):
        _fetch("https://host/m.json", handler)
