"""Environment-variable override wrapper for secret stores."""

from __future__ import annotations

import os

from ..store import ENV_SECRET_KEY, KEY_SECRET_KEY, SERVICE_NAME, SecretStore


class EnvOverrideSecretStore(SecretStore):
    """Wrapper that lets an environment variable supply one secret.

    Only reads of (service, key) return the environment value, and only when
    the variable is non-empty. Every other read, and every set/delete
    (including for the overridden key), goes to the wrapped store.

    Examples:
        >>> store = EnvOverrideSecretStore(KeyringSecretStore())
        >>> store.get(SERVICE_NAME, KEY_SECRET_KEY)  # $PUB_SECRET_KEY if set
    """

    def __init__(
        self,
        backend: SecretStore,
        env_var: str = ENV_SECRET_KEY,
        service: str = SERVICE_NAME,
        key: str = KEY_SECRET_KEY,
    ):
        """Initialize the override wrapper.

        Args:
            backend: The underlying store to delegate to
            env_var: Environment variable consulted for the overridden key
            service: Service of the overridden secret
            key: Key of the overridden secret
        """
        self._backend = backend
        self._env_var = env_var
        self._service = service
        self._key = key

    @property
    def backend(self) -> SecretStore:
        """The wrapped store."""
        return self._backend

    @property
    def env_var(self) -> str:
        return self._env_var

    def env_override(self) -> str | None:
        """Return the override value, or None when the variable is unset or empty."""
        return os.environ.get(self._env_var) or None

    def get(self, service: str, key: str) -> str:
        if service == self._service and key == self._key:
            value = self.env_override()
            if value is not None:
                return value
        return self._backend.get(service, key)

    def set(self, service: str, key: str, value: str) -> None:
        self._backend.set(service, key, value)

    def delete(self, service: str, key: str) -> None:
        self._backend.delete(service, key)
