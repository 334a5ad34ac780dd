"""Off-chain metadata loader.

A credential only stores ``metadata_uri``; the descriptive JSON (name,
description, image, attributes) lives elsewhere, usually on IPFS.  This
module fetches and parses it for the API.  The ledger never calls it:
an unreachable gateway must not affect minting or revocation.

IPFS URIS
-----------
Browsers and httpx can't speak ``ipfs://`` directly, so we rewrite to an
HTTP gateway:

    ipfs://<cid>/meta.json  ->  https://ipfs.io/ipfs/<cid>/meta.json

The gateway is configurable (IPFS_GATEWAY) because public gateways are
slow and rate-limited; production should point at a pinned one.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from app.core.metrics import METADATA_FETCHES
from app.models.metadata import CredentialMetadata

logger = logging.getLogger(__name__)

_IPFS_PREFIX = "ipfs://"


class MetadataFetchError(Exception):
    pass


def resolve_uri(uri: str, gateway: str) -> str:
    if uri.startswith(_IPFS_PREFIX):
        path = uri[len(_IPFS_PREFIX) :]
        # Tolerate the legacy ipfs://ipfs/<cid> form.
        if path.startswith("ipfs/"):
            path = path[len("ipfs/") :]
        if not path:
            raise MetadataFetchError(f"empty IPFS path in {uri!r}")
        return gateway.rstrip("/") + "/" + path
    if uri.startswith(("http://", "https://")):
        return uri
    raise MetadataFetchError(f"unsupported metadata URI scheme: {uri!r}")


async def fetch_metadata(
    uri: str,
    *,
    gateway: str,
    timeout: float,
    client: httpx.AsyncClient | None = None,
) -> CredentialMetadata:
    """Fetch and validate the metadata document behind ``uri``.

    Raises MetadataFetchError for every failure mode (bad scheme,
    transport error, non-2xx, invalid JSON, wrong shape) so callers
    handle one exception type.
    """
    url = resolve_uri(uri, gateway)

    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    try:
        resp = await http.get(url)
        resp.raise_for_status()
        metadata = CredentialMetadata.model_validate(resp.json())
    except httpx.HTTPStatusError as e:
        METADATA_FETCHES.labels(result="error").inc()
        logger.warning("Metadata fetch failed url=%s status=%d", url, e.response.status_code)
        raise MetadataFetchError(
            f"metadata host returned {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        METADATA_FETCHES.labels(result="error").inc()
        logger.warning("Metadata fetch failed url=%s: %s", url, e)
        raise MetadataFetchError(f"could not reach metadata host: {e}") from e
    except (ValueError, ValidationError) as e:
        # resp.json() raises ValueError (JSONDecodeError) on non-JSON bodies
        METADATA_FETCHES.labels(result="error").inc()
        logger.warning("Metadata document invalid url=%s: %s", url, e)
        raise MetadataFetchError("metadata document is not valid") from e
    finally:
        if owns_client:
            await http.aclose()

    METADATA_FETCHES.labels(result="ok").inc()
    return metadata
