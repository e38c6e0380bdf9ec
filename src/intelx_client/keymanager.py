"""IntelX credential and endpoint lookup using the system keychain."""

from __future__ import annotations

import logging
import os

import keyring

logger = logging.getLogger(__name__)

SERVICE_NAME = "intelx-client"

# Key identifiers
KEYS = {
    "INTELX_URL": "url",
    "INTELX_TOKEN": "token",
    "INTELX_CERTIFICATE": "certificate",
}


def get_api_key(key_name: str) -> str | None:
    """Retrieve a setting from the environment or secure storage.

    Order of precedence:
    1. Environment variable (for CI/containers)
    2. System keychain
    """
    env_value = os.environ.get(key_name)
    if env_value:
        return env_value

    service_key = KEYS.get(key_name)
    if service_key:
        try:
            value: str | None = keyring.get_password(SERVICE_NAME, service_key)
            if value:
                return value
        except keyring.errors.KeyringError as e:
            logger.warning(f"Keyring error retrieving {key_name}: {e}")

    return None


def set_api_key(key_name: str, value: str) -> bool:
    """Store a setting in the system keychain."""
    service_key = KEYS.get(key_name)
    if not service_key:
        logger.error(f"Unknown key: {key_name}. Valid keys: {list(KEYS.keys())}")
        return False

    if not value or not value.strip():
        logger.error(f"Refusing to store empty value for {key_name}")
        return False

    try:
        keyring.set_password(SERVICE_NAME, service_key, value.strip())
        logger.info(f"Stored {key_name} in system keychain")
        return True
    except keyring.errors.KeyringError as e:
        logger.error(f"Failed to store {key_name}: {e}")
        return False


def delete_api_key(key_name: str) -> bool:
    """Remove a setting from the system keychain."""
    service_key = KEYS.get(key_name)
    if not service_key:
        logger.error(f"Unknown key: {key_name}")
        return False

    try:
        keyring.delete_password(SERVICE_NAME, service_key)
        logger.info(f"Deleted {key_name} from system keychain")
        return True
    except keyring.errors.KeyringError as e:
        logger.warning(f"Failed to delete {key_name}: {e}")
        return False


def is_key_configured(key_name: str) -> bool:
    """Check whether a setting is available without returning its value."""
    if os.environ.get(key_name):
        return True

    service_key = KEYS.get(key_name)
    if service_key:
        try:
            return keyring.get_password(SERVICE_NAME, service_key) is not None
        except keyring.errors.KeyringError:
            return False

    return False


def list_configured_keys() -> dict[str, bool]:
    return {key_name: is_key_configured(key_name) for key_name in KEYS}
