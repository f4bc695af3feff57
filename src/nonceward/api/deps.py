# FastAPI dependencies for nonce-protected endpoints.
# Created: 2026-10-18

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

from fastapi import HTTPException, Request

from nonceward.errors import NonceRejected
from nonceward.service import get_nonce_service
from nonceward.tokens import Action, Identity
from nonceward.verifier import RequestContext, VerificationMode, VerificationResult

logger = logging.getLogger(__name__)

NONCE_HEADER = "X-Nonce"

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _resolve(value: Any, request: Request) -> Any:
    if callable(value):
        value = value(request)
        if inspect.isawaitable(value):
            value = await value
    return value


async def read_nonce(request: Request, name: str) -> Any:
    """Find the submitted nonce: query argument, then header, then form field."""
    token = request.query_params.get(name)
    if token is None:
        token = request.headers.get(NONCE_HEADER)
    if token is None:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(_FORM_TYPES):
            form = await request.form()
            token = form.get(name)
    return token


def get_identity(request: Request) -> str:
    """The identity authenticated by ``auth_middleware``."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return identity


def require_nonce(
    action: Action | Callable[[Request], Action],
    mode: VerificationMode = VerificationMode.STRICT,
    identity_getter: Callable[[Request], Identity] | None = None,
    require_same_origin: bool = False,
    require_async: bool = False,
):
    """FastAPI dependency that checks the request's nonce for *action*.

    Usage::

        def delete_action(request):
            return f"delete-post-{request.path_params['post_id']}"

        @router.post(
            "/posts/{post_id}/delete",
            dependencies=[Depends(require_nonce(delete_action))],
        )
        async def delete_post(post_id: int): ...

    *action* and *identity_getter* may be plain values or callables taking the
    request (sync or async). STRICT mode answers 403 on failure; SOFT mode
    hands the VerificationResult to the endpoint.
    """

    async def _check(request: Request) -> VerificationResult:
        service = get_nonce_service()
        resolved_action = await _resolve(action, request)
        identity = await _resolve(identity_getter, request) if identity_getter else None
        token = await read_nonce(request, service.settings.query_arg)

        context = None
        if require_same_origin or require_async:
            context = RequestContext.from_headers(
                request.headers,
                allowed_origin=service.settings.allowed_origin or str(request.base_url),
                require_same_origin=require_same_origin,
                require_async=require_async,
            )

        try:
            return service.verify_token(
                token, resolved_action, identity, mode=mode, context=context
            )
        except NonceRejected as e:
            raise HTTPException(status_code=e.status_code, detail=e.message) from e

    return _check
