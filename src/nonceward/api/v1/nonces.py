# Nonces router: issue, verify, inspect policy.
# Created: 2026-10-18

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from nonceward.api.deps import get_identity
from nonceward.api.v1.schemas.nonces import (
    IssueNonceRequest,
    IssueNonceResponse,
    PolicyResponse,
    VerifyNonceRequest,
    VerifyNonceResponse,
)
from nonceward.service import NonceService, get_nonce_service
from nonceward.verifier import VerificationMode

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Nonces"])


@router.post("/nonces", response_model=IssueNonceResponse)
async def issue_nonce(
    body: IssueNonceRequest,
    identity: str = Depends(get_identity),
    service: NonceService = Depends(get_nonce_service),
):
    """Issue a nonce for ``action`` bound to the calling identity."""
    token = service.generate_token(body.action, identity)
    return IssueNonceResponse(
        token=token,
        action=body.action,
        identity=identity,
        expires_in_seconds=service.policy.window_seconds,
    )


@router.post("/nonces/verify", response_model=VerifyNonceResponse)
async def verify_nonce(
    body: VerifyNonceRequest,
    identity: str = Depends(get_identity),
    service: NonceService = Depends(get_nonce_service),
):
    """Report whether a nonce is valid for the caller. Never says why it is not."""
    result = service.verify_token(body.token, body.action, identity, mode=VerificationMode.SOFT)
    return VerifyNonceResponse(valid=result.valid, result=result.name)


@router.get("/nonces/policy", response_model=PolicyResponse)
async def get_policy(service: NonceService = Depends(get_nonce_service)):
    policy = service.policy
    return PolicyResponse(
        window_seconds=policy.window_seconds,
        bucket_seconds=policy.bucket_seconds,
        token_length=service.token_length,
    )
