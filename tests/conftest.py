# Shared fixtures: every test gets an empty config dir, no NONCEWARD_* env
# vars, fresh cached settings and no default service.
# Created: 2026-10-18

import os

import pytest

from nonceward.config import get_settings
from nonceward.keys import StaticKeyProvider
from nonceward.lifetime import configure
from nonceward.service import NonceService, reset_nonce_service

SECRET = "0123456789abcdef-test-secret"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    for key in list(os.environ):
        if key.startswith("NONCEWARD_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("NONCEWARD_CONFIG_DIR", str(tmp_path / "config"))
    get_settings.cache_clear()
    reset_nonce_service()
    yield
    get_settings.cache_clear()
    reset_nonce_service()

@pytest.fixture
def key_provider():
    return StaticKeyProvider(SECRET)

@pytest.fixture
def service(key_provider):
    return NonceService(key_provider=key_provider, policy=configure(24, "hours"))
