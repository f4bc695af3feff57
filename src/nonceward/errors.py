# Exception taxonomy for nonceward.
# Created: 2026-10-18
#
# Invalid tokens are *results* (VerificationResult.INVALID), not exceptions.
# Only misconfiguration and strict-mode rejections raise.

from __future__ import annotations

__all__ = [
    "NonceError",
    "ConfigurationError",
    "PolicyViolation",
    "NonceRejected",
]


class NonceError(Exception):
    """Base class for every error raised by nonceward."""


class ConfigurationError(NonceError):
    """No usable secret (or another fatal setting) is configured."""


class PolicyViolation(NonceError):
    """A verification policy was not satisfied."""

    status_code: int = 403


class NonceRejected(PolicyViolation):
    """Raised by strict verification when a request must be aborted.

    The message is the same for every failure (malformed, expired, wrong
    action or identity, failed context check).
    """

    def __init__(self, message: str = "The link you followed has expired or is invalid."):
        super().__init__(message)
        self.message = message
