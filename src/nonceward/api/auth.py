# HTTP auth middleware for the nonce API.
# Created: 2026-10-18
#
# Each bearer token in ``settings.api_tokens`` authenticates one identity.
# The middleware stores it on ``request.state.identity``; endpoints read it
# through ``deps.get_identity`` and never from the request body.

from __future__ import annotations

import hmac
import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from nonceward.config import get_settings

logger = logging.getLogger(__name__)

EXEMPT_PATHS = (
    "/api/v1/docs",
    "/api/v1/redoc",
    "/api/v1/openapi.json",
)


def _bearer(request: Request) -> str:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return ""
    return auth_header.removeprefix("Bearer ").strip()


def authenticate(request: Request) -> str | None:
    """Return the identity whose API token the request carries, or None."""
    presented = _bearer(request)
    if not presented:
        return None

    matched = None
    for identity, token in get_settings().api_tokens.items():
        # No early exit: every configured token is compared
        if hmac.compare_digest(presented.encode(), token.get_secret_value().encode()):
            matched = identity
    return matched


async def auth_middleware(request: Request, call_next):
    for path in EXEMPT_PATHS:
        if request.url.path.startswith(path):
            return await call_next(request)

    identity = authenticate(request)
    if identity is None:
        client_ip = request.client.host if request.client else "unknown"
        logger.warning("Unauthorized API request from %s to %s", client_ip, request.url.path)
        return JSONResponse(status_code=401, content={"detail": "Unauthorized"})

    request.state.identity = identity
    return await call_next(request)
