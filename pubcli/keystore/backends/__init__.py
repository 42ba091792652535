"""Secret store backend implementations."""

from pubcli.keystore.backends.env_backend import EnvOverrideSecretStore
from pubcli.keystore.backends.keyring_backend import KeyringSecretStore
from pubcli.keystore.backends.memory_backend import MemorySecretStore

__all__ = [
    "EnvOverrideSecretStore",
    "KeyringSecretStore",
    "MemorySecretStore",
]
