"""Account authentication for the dashboard API.

The session verifier lives outside this service; it hands us bearer
tokens of the form ``<account_id>.<hex hmac-sha256(account_id)>`` signed
with the shared ``AUTH_SIGNING_SECRET``.  In development the
``X-Account-ID`` header is trusted instead.
"""

from __future__ import annotations

import hashlib
import hmac

from fastapi import Header, HTTPException

from linear_connect.common.logging import get_logger
from linear_connect.common.settings import get_settings

log = get_logger(__name__)


def sign_account_token(account_id: str, secret: str | None = None) -> str:
    """Issue a bearer token for ``account_id``."""
    key = (secret if secret is not None else get_settings().auth_signing_secret).encode()
    digest = hmac.new(key, account_id.encode(), hashlib.sha256).hexdigest()
    return f"{account_id}.{digest}"


async def require_account(
    authorization: str = Header(default=""),
    x_account_id: str = Header(default=""),
) -> str:
    """Resolve the calling account id or reject with 401."""
    settings = get_settings()

    if settings.environment == "development" and x_account_id:
        return x_account_id

    if not authorization.startswith("Bearer "):
        log.warning("auth_missing")
        raise HTTPException(status_code=401, detail="Missing authorization")

    token = authorization.removeprefix("Bearer ").strip()
    account_id, _, signature = token.rpartition(".")
    if not account_id or not signature or not settings.auth_signing_secret:
        log.warning("auth_malformed")
        raise HTTPException(status_code=401, detail="Invalid token")

    expected = sign_account_token(account_id, settings.auth_signing_secret)
    if not hmac.compare_digest(token, expected):
        log.warning("auth_failed", account_id=account_id)
        raise HTTPException(status_code=401, detail="Invalid token")

    return account_id
