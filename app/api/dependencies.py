from __future__ import annotations

import logging
from typing import Annotated

import httpx
import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.models.principal import Principal, Role
from app.services import token_service
from app.services.ledger import CredentialLedger

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> Principal:
    """Extract and validate the JWT bearer token. Returns a Principal.

    Used as a FastAPI dependency on every state-changing endpoint.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        claims = token_service.decode_access_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token rejected")
        raise _unauthorized("Token expired") from None
    except jwt.InvalidTokenError as e:
        logger.warning("Invalid token rejected: %s", e)
        raise _unauthorized("Invalid token") from None

    principal = Principal(address=claims["sub"])
    logger.debug("Token validated for address=%s", principal.address)
    return principal


def get_ledger(request: Request) -> CredentialLedger:
    """The ledger instance built once at startup (see app.main)."""
    return request.app.state.ledger


def get_http_client(request: Request) -> httpx.AsyncClient | None:
    # Set by the lifespan; None when running without it (plain TestClient).
    return getattr(request.app.state, "http_client", None)


def require_role(role: Role):
    """Dependency factory: demand a ledger role.

    Usage: Depends(require_role("admin"))
    Roles come from the ledger's registry, not the token.
    """

    def _guard(
        principal: Annotated[Principal, Depends(require_user)],
        ledger: Annotated[CredentialLedger, Depends(get_ledger)],
    ) -> Principal:
        if not ledger.has_role(principal.address, role):
            logger.warning(
                "Access denied: address=%s missing role=%s",
                principal.address,
                role,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"error": "NotAuthorized", "message": "Insufficient permissions"},
            )
        return principal

    return _guard
