"""Nonce verification.

The verifier recomputes the expected nonce for the current tick and the one
before it and compares both in constant time. Malformed input is just an
invalid nonce. Nothing here says *why* a nonce failed.

Modes:
  - SOFT:   return the VerificationResult
  - STRICT: raise NonceRejected on failure so the transport can abort (403)

An optional RequestContext adds same-origin and async-call checks on top of
the token math.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, IntEnum
from urllib.parse import urlsplit

from nonceward.errors import NonceRejected
from nonceward.keys import KeyProvider
from nonceward.lifetime import LifetimePolicy
from nonceward.tokens import DEFAULT_TOKEN_LENGTH, Action, Identity, derive

logger = logging.getLogger(__name__)

__all__ = [
    "VerificationResult",
    "VerificationMode",
    "RequestContext",
    "verify",
    "enforce",
    "same_origin",
]

_DEFAULT_PORTS = {"http": 80, "https": 443}


class VerificationResult(IntEnum):
    """0 = invalid, 1 = issued in the current bucket, 2 = issued in the previous one."""

    INVALID = 0
    VALID_CURRENT = 1
    VALID_PREVIOUS = 2

    @property
    def valid(self) -> bool:
        return self is not VerificationResult.INVALID


class VerificationMode(str, Enum):
    STRICT = "strict"  # abort the request on failure
    SOFT = "soft"  # report only


def _origin_tuple(url: str) -> tuple[str, str, int] | None:
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except ValueError:
        return None
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if not scheme or not host:
        return None
    return scheme, host, port or _DEFAULT_PORTS.get(scheme, 0)


def same_origin(url: str | None, allowed_origin: str | None) -> bool:
    """True if *url* has the same scheme, host and port as *allowed_origin*."""
    if not url or not allowed_origin:
        return False
    left = _origin_tuple(url)
    return left is not None and left == _origin_tuple(allowed_origin)


@dataclass(frozen=True)
class RequestContext:
    """Request facts needed by the optional context checks."""

    origin: str | None = None
    referer: str | None = None
    requested_with: str | None = None
    allowed_origin: str | None = None
    require_same_origin: bool = False
    require_async: bool = False

    @classmethod
    def from_headers(
        cls,
        headers: Mapping[str, str],
        allowed_origin: str | None = None,
        require_same_origin: bool = False,
        require_async: bool = False,
    ) -> RequestContext:
        lowered = {k.lower(): v for k, v in headers.items()}
        return cls(
            origin=lowered.get("origin"),
            referer=lowered.get("referer"),
            requested_with=lowered.get("x-requested-with"),
            allowed_origin=allowed_origin,
            require_same_origin=require_same_origin,
            require_async=require_async,
        )

    @property
    def is_async(self) -> bool:
        return (self.requested_with or "").lower() == "xmlhttprequest"

    def satisfied(self) -> bool:
        if self.require_async and not self.is_async:
            return False
        if self.require_same_origin:
            # Browsers omit Origin on some same-origin GETs; fall back to Referer.
            source = self.origin if self.origin and self.origin != "null" else self.referer
            if not same_origin(source, self.allowed_origin):
                return False
        return True


def verify(
    token: object,
    action: Action,
    identity: Identity,
    policy: LifetimePolicy,
    key_provider: KeyProvider,
    now: float | None = None,
    length: int = DEFAULT_TOKEN_LENGTH,
) -> VerificationResult:
    """Check *token* against the current and previous tick of *policy*.

    Never raises for bad input; ConfigurationError from the key provider
    propagates.
    """
    if not isinstance(token, str) or len(token) != length or not token.isascii():
        return VerificationResult.INVALID

    secret = key_provider.get_secret()
    tick = policy.tick(now)
    expected_current = derive(secret, action, identity, tick, policy.window_seconds, length)
    expected_previous = derive(secret, action, identity, tick - 1, policy.window_seconds, length)

    candidate = token.encode()
    matches_current = hmac.compare_digest(candidate, expected_current.encode())
    matches_previous = hmac.compare_digest(candidate, expected_previous.encode())

    if matches_current:
        return VerificationResult.VALID_CURRENT
    if matches_previous:
        return VerificationResult.VALID_PREVIOUS
    return VerificationResult.INVALID


def enforce(
    result: VerificationResult,
    mode: VerificationMode = VerificationMode.SOFT,
    context: RequestContext | None = None,
    action: Action | None = None,
) -> VerificationResult:
    """Apply context checks and the verification mode to a raw result."""
    if result.valid and context is not None and not context.satisfied():
        result = VerificationResult.INVALID

    if result.valid:
        return result

    if VerificationMode(mode) is VerificationMode.STRICT:
        logger.info("Rejected request for action %r: nonce check failed", action)
        raise NonceRejected()

    logger.debug("Nonce check failed for action %r", action)
    return result
