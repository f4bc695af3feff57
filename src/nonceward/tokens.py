"""Nonce derivation.

``token = hex(HMAC_SHA256(secret, message))[:length]`` where *message* binds
the tick, the policy window, the action and the identity. Nothing is stored:
the verifier recomputes the same value.
"""

import hashlib
import hmac

from nonceward.keys import KeyProvider
from nonceward.lifetime import LifetimePolicy

__all__ = [
    "Action",
    "Identity",
    "DEFAULT_ACTION",
    "DEFAULT_TOKEN_LENGTH",
    "derive",
    "generate",
    "check_token_length",
]

Action = str | int
Identity = str | int | None

DEFAULT_ACTION: Action = -1
DEFAULT_TOKEN_LENGTH = 10
MIN_TOKEN_LENGTH = 8
MAX_TOKEN_LENGTH = 64  # full sha256 hexdigest


def check_token_length(length: int) -> int:
    if isinstance(length, bool) or not isinstance(length, int):
        raise ValueError(f"token length must be an integer, got {length!r}")
    if not MIN_TOKEN_LENGTH <= length <= MAX_TOKEN_LENGTH:
        raise ValueError(
            f"token length must be between {MIN_TOKEN_LENGTH} and {MAX_TOKEN_LENGTH}, got {length}"
        )
    return length


def _field(value: object) -> str:
    text = "" if value is None else str(value)
    # Length prefix keeps ("a|b", "c") and ("a", "b|c") apart.
    return f"{len(text)}:{text}"


def _message(action: Action, identity: Identity, tick: int, window_seconds: int) -> bytes:
    return f"{tick}|{window_seconds}|{_field(action)}|{_field(identity)}".encode()


def derive(
    secret: bytes,
    action: Action,
    identity: Identity,
    tick: int,
    window_seconds: int,
    length: int = DEFAULT_TOKEN_LENGTH,
) -> str:
    """Pure derivation for an explicit tick."""
    digest = hmac.new(
        secret, _message(action, identity, tick, window_seconds), hashlib.sha256
    ).hexdigest()
    return digest[:length]


def generate(
    action: Action,
    identity: Identity,
    policy: LifetimePolicy,
    key_provider: KeyProvider,
    now: float | None = None,
    length: int = DEFAULT_TOKEN_LENGTH,
) -> str:
    """Token for *action*/*identity* at the current tick of *policy*.

    Raises ConfigurationError if the key provider has no secret.
    """
    return derive(
        key_provider.get_secret(),
        action,
        identity,
        policy.tick(now),
        policy.window_seconds,
        length,
    )
