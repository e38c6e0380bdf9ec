"""Shared test fixtures."""

import os

import pytest

# Settings must come from each test, never from the developer's shell.
for _name in ("INTELX_URL", "INTELX_TOKEN", "INTELX_CERTIFICATE"):
    os.environ.pop(_name, None)


@pytest.fixture(autouse=True)
def empty_keychain(monkeypatch):
    """Keep tests away from the real system keychain."""
    monkeypatch.setattr("intelx_client.keymanager.keyring.get_password", lambda *a: None)


@pytest.fixture
def base_url():
    return "https://intelx.example.com"
