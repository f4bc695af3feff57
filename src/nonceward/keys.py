# Key providers: where the HMAC secret comes from.
# Created: 2026-10-18
#
# A provider returns the same secret for the life of the process. Lazy
# initialisation (file creation, random generation) runs under a lock so
# concurrent first calls can never end up with two different secrets.

from __future__ import annotations

import logging
import secrets
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from nonceward.errors import ConfigurationError

if TYPE_CHECKING:
    from nonceward.config import Settings

logger = logging.getLogger(__name__)

MIN_SECRET_BYTES = 16
_GENERATED_SECRET_BYTES = 32

__all__ = [
    "KeyProvider",
    "StaticKeyProvider",
    "FileKeyProvider",
    "EphemeralKeyProvider",
    "provider_from_settings",
    "MIN_SECRET_BYTES",
]


@runtime_checkable
class KeyProvider(Protocol):
    """Anything with ``get_secret() -> bytes``."""

    def get_secret(self) -> bytes: ...


def _as_secret(value: str | bytes, source: str) -> bytes:
    secret = value.encode() if isinstance(value, str) else bytes(value)
    if len(secret) < MIN_SECRET_BYTES:
        raise ConfigurationError(
            f"Secret from {source} is too short "
            f"({len(secret)} bytes, need at least {MIN_SECRET_BYTES})"
        )
    return secret


class StaticKeyProvider:
    """A secret handed in directly."""

    def __init__(self, secret: str | bytes):
        self._secret = _as_secret(secret, "static configuration")

    def get_secret(self) -> bytes:
        return self._secret

    def __repr__(self) -> str:
        return "StaticKeyProvider(<redacted>)"


class FileKeyProvider:
    """Hex secret stored in a file.

    With ``create=True`` a missing file is filled with a fresh random secret
    (owner-only permissions) on first use. The file is read once per
    provider instance.
    """

    def __init__(self, path: Path | str, create: bool = False):
        self.path = Path(path).expanduser()
        self.create = create
        self._secret: bytes | None = None
        self._lock = threading.Lock()

    def get_secret(self) -> bytes:
        if self._secret is not None:
            return self._secret
        with self._lock:
            if self._secret is None:
                self._secret = self._load_or_create()
        return self._secret

    def _load_or_create(self) -> bytes:
        if not self.path.exists():
            if not self.create:
                raise ConfigurationError(f"Secret file not found: {self.path}")
            self._write_new_secret()

        try:
            raw = self.path.read_text().strip()
        except OSError as e:
            raise ConfigurationError(f"Cannot read secret file {self.path}: {e}") from e

        try:
            secret = bytes.fromhex(raw)
        except ValueError:
            raise ConfigurationError(f"Secret file {self.path} is not hex-encoded") from None
        return _as_secret(secret, str(self.path))

    def _write_new_secret(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(secrets.token_hex(_GENERATED_SECRET_BYTES))
        except OSError as e:
            raise ConfigurationError(f"Cannot create secret file {self.path}: {e}") from e
        # Restrict permissions
        try:
            self.path.chmod(0o600)
        except OSError:
            logger.warning("Could not restrict permissions on %s", self.path)
        logger.info("Generated new nonce secret at %s", self.path)

    def __repr__(self) -> str:
        return f"FileKeyProvider({str(self.path)!r}, create={self.create})"


class EphemeralKeyProvider:
    """Random secret that lives only as long as the process (dev mode).

    Nonces stop verifying after a restart.
    """

    def __init__(self):
        self._secret: bytes | None = None
        self._lock = threading.Lock()

    def get_secret(self) -> bytes:
        if self._secret is not None:
            return self._secret
        with self._lock:
            if self._secret is None:
                self._secret = secrets.token_bytes(_GENERATED_SECRET_BYTES)
                logger.warning("Using an ephemeral nonce secret; not for production use")
        return self._secret

    def __repr__(self) -> str:
        return "EphemeralKeyProvider()"


def provider_from_settings(settings: Settings) -> KeyProvider:
    """Pick a provider: explicit secret, then secret file, then ephemeral (if allowed)."""
    if settings.secret is not None:
        return StaticKeyProvider(settings.secret.get_secret_value())
    if settings.secret_file is not None:
        return FileKeyProvider(settings.secret_file, create=True)
    if settings.ephemeral:
        return EphemeralKeyProvider()
    logger.error("No nonce secret configured")
    raise ConfigurationError(
        "No nonce secret configured. Set NONCEWARD_SECRET or NONCEWARD_SECRET_FILE, "
        "or NONCEWARD_EPHEMERAL=true for development."
    )
