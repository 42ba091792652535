"""Storage for the long-lived API secret.

Key Components:
- store: SecretStore interface, error types and well-known names
- backends: keyring, environment override and in-memory implementations
"""

from .backends import EnvOverrideSecretStore, KeyringSecretStore, MemorySecretStore
from .store import (
    ENV_SECRET_KEY,
    KEY_SECRET_KEY,
    SERVICE_NAME,
    SecretBackendError,
    SecretNotFoundError,
    SecretStore,
    SecretStoreError,
)


def default_secret_store() -> SecretStore:
    """Keychain store with the PUB_SECRET_KEY override applied."""
    return EnvOverrideSecretStore(KeyringSecretStore())


__all__ = [
    "ENV_SECRET_KEY",
    "KEY_SECRET_KEY",
    "SERVICE_NAME",
    "EnvOverrideSecretStore",
    "KeyringSecretStore",
    "MemorySecretStore",
    "SecretBackendError",
    "SecretNotFoundError",
    "SecretStore",
    "SecretStoreError",
    "default_secret_store",
]
