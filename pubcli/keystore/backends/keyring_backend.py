"""OS keychain backend built on the `keyring` library."""

from __future__ import annotations

import logging

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ..store import SecretBackendError, SecretNotFoundError, SecretStore

logger = logging.getLogger(__name__)


class KeyringSecretStore(SecretStore):
    """Secret store backed by the platform keychain.

    Uses macOS Keychain, Windows Credential Locker or the Linux Secret
    Service, whichever `keyring` resolves for the current user.
    """

    def get(self, service: str, key: str) -> str:
        try:
            value = keyring.get_password(service, key)
        except KeyringError as e:
            raise SecretBackendError(f"Keyring unavailable while reading {service}/{key}: {e}") from e
        if value is None:
            raise SecretNotFoundError(f"No secret stored for {service}/{key}")
        return value

    def set(self, service: str, key: str, value: str) -> None:
        try:
            keyring.set_password(service, key, value)
        except KeyringError as e:
            raise SecretBackendError(f"Keyring unavailable while writing {service}/{key}: {e}") from e
        logger.debug(f"Stored secret in keyring: {service}/{key}")

    def delete(self, service: str, key: str) -> None:
        try:
            keyring.delete_password(service, key)
        except PasswordDeleteError:
            # Raised by keyring backends when the entry does not exist
            logger.debug(f"No keyring entry to delete: {service}/{key}")
        except KeyringError as e:
            raise SecretBackendError(f"Keyring unavailable while deleting {service}/{key}: {e}") from e
