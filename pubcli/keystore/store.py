"""Secret storage abstraction for the long-lived API secret.

Provides one interface with interchangeable backends (OS keychain,
environment override, in-memory double).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

# Keychain service and key under which the secret is stored
SERVICE_NAME = "pubcli"
KEY_SECRET_KEY = "secret_key"

# Environment variable that pre-empts the keychain for KEY_SECRET_KEY
ENV_SECRET_KEY = "PUB_SECRET_KEY"


class SecretStoreError(Exception):
    """Base exception for secret storage operations."""

    pass


class SecretNotFoundError(SecretStoreError):
    """Raised when no secret is stored under the requested key."""

    pass


class SecretBackendError(SecretStoreError):
    """Raised when the storage backend itself is unavailable or fails."""

    pass


class SecretStore(ABC):
    """Abstract base class for secret storage backends.

    Secrets are addressed by a (service, key) pair.
    """

    @abstractmethod
    def get(self, service: str, key: str) -> str:
        """Retrieve a secret.

        Args:
            service: Namespace the secret belongs to
            key: Name of the secret within the namespace

        Returns:
            The stored secret value

        Raises:
            SecretNotFoundError: If nothing is stored under (service, key)
            SecretBackendError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    def set(self, service: str, key: str, value: str) -> None:
        """Store a secret, replacing any previous value.

        Raises:
            SecretBackendError: If the backend cannot be reached
        """
        pass

    @abstractmethod
    def delete(self, service: str, key: str) -> None:
        """Delete a secret.

        Deleting a key that does not exist succeeds.

        Raises:
            SecretBackendError: If the backend cannot be reached
        """
        pass
