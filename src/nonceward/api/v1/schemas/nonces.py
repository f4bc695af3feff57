# Nonce schemas.
# Created: 2026-10-18
#
# The identity a nonce is bound to is the authenticated API caller; request
# bodies carry no identity field.

from __future__ import annotations

from pydantic import BaseModel, Field


class IssueNonceRequest(BaseModel):
    """Request a nonce for an action."""

    action: str | int = Field(-1, description="Action the nonce protects")


class IssueNonceResponse(BaseModel):
    token: str
    action: str | int
    identity: str
    expires_in_seconds: int


class VerifyNonceRequest(BaseModel):
    """Check a nonce against an action for the calling identity."""

    token: str
    action: str | int = -1


class VerifyNonceResponse(BaseModel):
    valid: bool
    result: str


class PolicyResponse(BaseModel):
    """Active lifetime policy."""

    window_seconds: int
    bucket_seconds: int
    token_length: int
