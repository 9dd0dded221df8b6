"""Request authentication based on the identity header set by the upstream proxy."""

from __future__ import annotations

from fastapi import HTTPException, Request

from summarysheet.config import AuthConfig


def authenticate(request: Request, config: AuthConfig) -> str:
    """Return the signed-in user id or raise 401/403."""

    user_id = (request.headers.get(config.user_header) or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="User must be authenticated.")

    if config.allowed_user_ids and user_id not in config.allowed_user_ids:
        raise HTTPException(status_code=403, detail="This account is not allowed to use the summary tool.")

    return user_id
