"""nonceward: stateless HMAC nonces.

A nonce is ``HMAC_SHA256(secret, tick | window | action | identity)``
truncated to a short hex string. Nothing is stored; verification recomputes
the value for the current and previous tick.

Quick start::

    import nonceward

    nonceward.set_key_provider(nonceward.StaticKeyProvider(my_secret))
    token = nonceward.generate_token("delete-post-5", "user:42")
    result = nonceward.verify_token(token, "delete-post-5", "user:42")
    if result:  # VALID_CURRENT or VALID_PREVIOUS
        ...
"""

from nonceward.errors import ConfigurationError, NonceError, NonceRejected, PolicyViolation
from nonceward.keys import (
    EphemeralKeyProvider,
    FileKeyProvider,
    KeyProvider,
    StaticKeyProvider,
)
from nonceward.lifetime import LifetimePolicy, TimeUnit
from nonceward.service import (
    NonceService,
    configure_lifetime,
    generate_token,
    get_nonce_service,
    reset_nonce_service,
    set_key_provider,
    verify_token,
)
from nonceward.verifier import RequestContext, VerificationMode, VerificationResult

__all__ = [
    "ConfigurationError",
    "EphemeralKeyProvider",
    "FileKeyProvider",
    "KeyProvider",
    "LifetimePolicy",
    "NonceError",
    "NonceRejected",
    "NonceService",
    "PolicyViolation",
    "RequestContext",
    "StaticKeyProvider",
    "TimeUnit",
    "VerificationMode",
    "VerificationResult",
    "configure_lifetime",
    "generate_token",
    "get_nonce_service",
    "reset_nonce_service",
    "set_key_provider",
    "verify_token",
]
