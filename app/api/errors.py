"""Ledger error kind -> HTTP response mapping."""

from __future__ import annotations

from fastapi import HTTPException, status

from app.services.errors import LedgerError

_STATUS_BY_KIND: dict[str, int] = {
    "NotAuthorized": status.HTTP_403_FORBIDDEN,
    "InvalidProficiency": status.HTTP_422_UNPROCESSABLE_CONTENT,
    "ArrayLengthMismatch": status.HTTP_422_UNPROCESSABLE_CONTENT,
    "TokenNotFound": status.HTTP_404_NOT_FOUND,
    "TokenAlreadyRevoked": status.HTTP_409_CONFLICT,
    "TokenIsSoulbound": status.HTTP_403_FORBIDDEN,
}


def ledger_http_error(e: LedgerError) -> HTTPException:
    return HTTPException(
        status_code=_STATUS_BY_KIND.get(e.kind, status.HTTP_400_BAD_REQUEST),
        detail={"error": e.kind, "message": str(e)},
    )
