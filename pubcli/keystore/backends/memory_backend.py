"""In-memory secret store for tests and dry runs."""

from __future__ import annotations

from ..store import SecretNotFoundError, SecretStore


class MemorySecretStore(SecretStore):
    """Secret store that keeps values in a dict.

    Failures can be injected per operation through `get_error`, `set_error`
    and `delete_error`; when set, the exception is raised instead of touching
    the data. Every call is appended to `calls` as (operation, service, key).
    """

    def __init__(
        self,
        data: dict[tuple[str, str], str] | None = None,
        get_error: Exception | None = None,
        set_error: Exception | None = None,
        delete_error: Exception | None = None,
    ):
        self._data: dict[tuple[str, str], str] = dict(data or {})
        self.get_error = get_error
        self.set_error = set_error
        self.delete_error = delete_error
        self.calls: list[tuple[str, str, str]] = []

    def with_data(self, service: str, key: str, value: str) -> MemorySecretStore:
        """Pre-populate a secret and return self for chaining."""
        self._data[(service, key)] = value
        return self

    def with_get_error(self, error: Exception) -> MemorySecretStore:
        self.get_error = error
        return self

    def with_set_error(self, error: Exception) -> MemorySecretStore:
        self.set_error = error
        return self

    def with_delete_error(self, error: Exception) -> MemorySecretStore:
        self.delete_error = error
        return self

    def get(self, service: str, key: str) -> str:
        self.calls.append(("get", service, key))
        if self.get_error is not None:
            raise self.get_error
        try:
            return self._data[(service, key)]
        except KeyError:
            raise SecretNotFoundError(f"No secret stored for {service}/{key}") from None

    def set(self, service: str, key: str, value: str) -> None:
        self.calls.append(("set", service, key))
        if self.set_error is not None:
            raise self.set_error
        self._data[(service, key)] = value

    def delete(self, service: str, key: str) -> None:
        self.calls.append(("delete", service, key))
        if self.delete_error is not None:
            raise self.delete_error
        self._data.pop((service, key), None)
