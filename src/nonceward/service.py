# Nonce service façade: generator, verifier, lifetime policy and key provider
# wired together, plus a lazily-built process-wide default instance.
# Created: 2026-10-18

from __future__ import annotations

import logging
import threading

from nonceward.config import Settings, get_settings
from nonceward.keys import KeyProvider, provider_from_settings
from nonceward.lifetime import LifetimePolicy, TimeUnit, configure
from nonceward.tokens import DEFAULT_ACTION, Action, Identity, check_token_length, generate
from nonceward.verifier import (
    RequestContext,
    VerificationMode,
    VerificationResult,
    enforce,
    verify,
)

logger = logging.getLogger(__name__)

__all__ = [
    "NonceService",
    "get_nonce_service",
    "reset_nonce_service",
    "generate_token",
    "verify_token",
    "configure_lifetime",
    "set_key_provider",
]


class NonceService:
    """Issues and checks nonces.

    Anything not passed in is taken from settings. The key provider is
    resolved on first use, so constructing a service never fails for lack
    of a secret; generating or verifying does.
    """

    def __init__(
        self,
        key_provider: KeyProvider | None = None,
        policy: LifetimePolicy | None = None,
        settings: Settings | None = None,
        token_length: int | None = None,
    ):
        self.settings = settings or get_settings()
        self._key_provider = key_provider
        self._policy = policy or configure(
            self.settings.lifetime_amount, self.settings.lifetime_unit
        )
        self.token_length = check_token_length(
            token_length if token_length is not None else self.settings.token_length
        )
        self._lock = threading.Lock()

    # -- configuration ------------------------------------------------------

    @property
    def policy(self) -> LifetimePolicy:
        return self._policy

    @property
    def key_provider(self) -> KeyProvider:
        provider = self._key_provider
        if provider is not None:
            return provider
        with self._lock:
            if self._key_provider is None:
                self._key_provider = provider_from_settings(self.settings)
            return self._key_provider

    def configure_lifetime(
        self, amount: int, unit: TimeUnit | str = TimeUnit.MINUTES
    ) -> LifetimePolicy:
        """Replace the lifetime policy. Nonces issued under the old one stop verifying."""
        policy = configure(amount, unit)
        self._policy = policy
        logger.info("Nonce lifetime set to %d seconds", policy.window_seconds)
        return policy

    def set_key_provider(self, provider: KeyProvider) -> None:
        if not isinstance(provider, KeyProvider):
            raise TypeError(f"Expected a KeyProvider, got {type(provider).__name__}")
        with self._lock:
            self._key_provider = provider
        logger.info("Nonce key provider set to %r", provider)

    # -- operations -----------------------------------------------------------

    def generate_token(
        self,
        action: Action = DEFAULT_ACTION,
        identity: Identity = None,
        now: float | None = None,
    ) -> str:
        return generate(
            action, identity, self._policy, self.key_provider, now=now, length=self.token_length
        )

    def verify_token(
        self,
        token: object,
        action: Action = DEFAULT_ACTION,
        identity: Identity = None,
        mode: VerificationMode = VerificationMode.SOFT,
        context: RequestContext | None = None,
        now: float | None = None,
    ) -> VerificationResult:
        """Verify *token*; in STRICT mode a failure raises NonceRejected."""
        result = verify(
            token,
            action,
            identity,
            self._policy,
            self.key_provider,
            now=now,
            length=self.token_length,
        )
        return enforce(result, mode=mode, context=context, action=action)


# ---------------------------------------------------------------------------
# Process-wide default service
# ---------------------------------------------------------------------------

_service: NonceService | None = None
_service_lock = threading.Lock()


def get_nonce_service() -> NonceService:
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = NonceService()
    return _service


def reset_nonce_service(service: NonceService | None = None) -> None:
    """Replace (or drop, with no argument) the default service. Mostly for tests."""
    global _service
    with _service_lock:
        _service = service


def generate_token(action: Action = DEFAULT_ACTION, identity: Identity = None) -> str:
    return get_nonce_service().generate_token(action, identity)


def verify_token(
    token: object,
    action: Action = DEFAULT_ACTION,
    identity: Identity = None,
    mode: VerificationMode = VerificationMode.SOFT,
    context: RequestContext | None = None,
) -> VerificationResult:
    return get_nonce_service().verify_token(token, action, identity, mode=mode, context=context)


def configure_lifetime(amount: int, unit: TimeUnit | str = TimeUnit.MINUTES) -> LifetimePolicy:
    return get_nonce_service().configure_lifetime(amount, unit)


def set_key_provider(provider: KeyProvider) -> None:
    get_nonce_service().set_key_provider(provider)
