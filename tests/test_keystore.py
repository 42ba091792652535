"""Tests for secret store backends."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from keyring.errors import KeyringError, NoKeyringError, PasswordDeleteError

from pubcli.keystore import (
    KEY_SECRET_KEY,
    SERVICE_NAME,
    EnvOverrideSecretStore,
    KeyringSecretStore,
    MemorySecretStore,
    SecretBackendError,
    SecretNotFoundError,
    SecretStore,
    default_secret_store,
)


class TestMemorySecretStore:
    def test_set_and_get(self):
        store = MemorySecretStore()
        store.set("pubcli", "secret_key", "test-secret-123")

        assert store.get("pubcli", "secret_key") == "test-secret-123"

    def test_get_not_found(self):
        store = MemorySecretStore()

        with pytest.raises(SecretNotFoundError):
            store.get("pubcli", "nonexistent")

    def test_delete(self):
        store = MemorySecretStore().with_data("pubcli", "secret_key", "to-delete")

        store.delete("pubcli", "secret_key")

        with pytest.raises(SecretNotFoundError):
            store.get("pubcli", "secret_key")

    def test_delete_absent_key_succeeds(self):
        store = MemorySecretStore()
        store.delete("pubcli", "never-set")

    def test_overwrite_value(self):
        store = MemorySecretStore()
        store.set("pubcli", "key", "value1")
        store.set("pubcli", "key", "value2")

        assert store.get("pubcli", "key") == "value2"

    def test_keys_are_scoped_by_service(self):
        store = MemorySecretStore().with_data("svc-a", "key", "a")

        with pytest.raises(SecretNotFoundError):
            store.get("svc-b", "key")

    def test_injected_errors(self):
        backend_down = SecretBackendError("keychain locked")
        store = (
            MemorySecretStore()
            .with_get_error(backend_down)
            .with_set_error(backend_down)
            .with_delete_error(backend_down)
        )

        with pytest.raises(SecretBackendError, match="keychain locked"):
            store.get("pubcli", "secret_key")
        with pytest.raises(SecretBackendError):
            store.set("pubcli", "secret_key", "value")
        with pytest.raises(SecretBackendError):
            store.delete("pubcli", "secret_key")

    def test_records_calls(self):
        store = MemorySecretStore().with_data("pubcli", "secret_key", "s")
        store.get("pubcli", "secret_key")
        store.delete("pubcli", "other")

        assert store.calls == [("get", "pubcli", "secret_key"), ("delete", "pubcli", "other")]


class TestKeyringSecretStore:
    def test_is_a_secret_store(self):
        assert isinstance(KeyringSecretStore(), SecretStore)

    def test_get_returns_password(self):
        with patch("keyring.get_password", return_value="from-keychain") as mock_get:
            assert KeyringSecretStore().get(SERVICE_NAME, KEY_SECRET_KEY) == "from-keychain"
        mock_get.assert_called_once_with(SERVICE_NAME, KEY_SECRET_KEY)

    def test_get_missing_raises_not_found(self):
        with patch("keyring.get_password", return_value=None):
            with pytest.raises(SecretNotFoundError):
                KeyringSecretStore().get(SERVICE_NAME, KEY_SECRET_KEY)

    def test_get_backend_failure_is_distinct_from_not_found(self):
        with patch("keyring.get_password", side_effect=NoKeyringError("no backend")):
            with pytest.raises(SecretBackendError) as exc_info:
                KeyringSecretStore().get(SERVICE_NAME, KEY_SECRET_KEY)
        assert not isinstance(exc_info.value, SecretNotFoundError)
        assert isinstance(exc_info.value.__cause__, NoKeyringError)

    def test_set_stores_password(self):
        with patch("keyring.set_password") as mock_set:
            KeyringSecretStore().set(SERVICE_NAME, KEY_SECRET_KEY, "new-secret")
        mock_set.assert_called_once_with(SERVICE_NAME, KEY_SECRET_KEY, "new-secret")

    def test_set_backend_failure(self):
        with patch("keyring.set_password", side_effect=KeyringError("locked")):
            with pytest.raises(SecretBackendError):
                KeyringSecretStore().set(SERVICE_NAME, KEY_SECRET_KEY, "new-secret")

    def test_delete_absent_entry_succeeds(self):
        with patch("keyring.delete_password", side_effect=PasswordDeleteError("not found")):
            KeyringSecretStore().delete(SERVICE_NAME, KEY_SECRET_KEY)

    def test_delete_backend_failure(self):
        with patch("keyring.delete_password", side_effect=NoKeyringError("no backend")):
            with pytest.raises(SecretBackendError):
                KeyringSecretStore().delete(SERVICE_NAME, KEY_SECRET_KEY)


class TestEnvOverrideSecretStore:
    def test_env_value_wins_without_touching_backend(self, monkeypatch):
        monkeypatch.setenv("PUB_SECRET_KEY", "env-secret")
        backend = MemorySecretStore().with_data(SERVICE_NAME, KEY_SECRET_KEY, "keychain-secret")
        store = EnvOverrideSecretStore(backend)

        assert store.get(SERVICE_NAME, KEY_SECRET_KEY) == "env-secret"
        assert backend.calls == []

    def test_env_value_wins_even_when_backend_is_down(self, monkeypatch):
        monkeypatch.setenv("PUB_SECRET_KEY", "env-secret")
        backend = MemorySecretStore(get_error=SecretBackendError("no keychain daemon"))

        assert EnvOverrideSecretStore(backend).get(SERVICE_NAME, KEY_SECRET_KEY) == "env-secret"

    def test_other_keys_still_use_backend(self, monkeypatch):
        monkeypatch.setenv("PUB_SECRET_KEY", "env-secret")
        backend = MemorySecretStore().with_data(SERVICE_NAME, "other_key", "other-value")
        store = EnvOverrideSecretStore(backend)

        assert store.get(SERVICE_NAME, "other_key") == "other-value"
        assert backend.calls == [("get", SERVICE_NAME, "other_key")]

    def test_other_service_same_key_uses_backend(self, monkeypatch):
        monkeypatch.setenv("PUB_SECRET_KEY", "env-secret")
        backend = MemorySecretStore().with_data("another-service", KEY_SECRET_KEY, "theirs")

        assert EnvOverrideSecretStore(backend).get("another-service", KEY_SECRET_KEY) == "theirs"

    def test_empty_env_value_falls_through(self, monkeypatch):
        monkeypatch.setenv("PUB_SECRET_KEY", "")
        backend = MemorySecretStore().with_data(SERVICE_NAME, KEY_SECRET_KEY, "keychain-secret")

        assert EnvOverrideSecretStore(backend).get(SERVICE_NAME, KEY_SECRET_KEY) == "keychain-secret"

    def test_unset_env_falls_through_to_not_found(self):
        store = EnvOverrideSecretStore(MemorySecretStore())

        with pytest.raises(SecretNotFoundError):
            store.get(SERVICE_NAME, KEY_SECRET_KEY)

    def test_set_and_delete_always_pass_through(self, monkeypatch):
        monkeypatch.setenv("PUB_SECRET_KEY", "env-secret")
        backend = MemorySecretStore()
        store = EnvOverrideSecretStore(backend)

        store.set(SERVICE_NAME, KEY_SECRET_KEY, "stored")
        store.delete(SERVICE_NAME, KEY_SECRET_KEY)

        assert backend.calls == [
            ("set", SERVICE_NAME, KEY_SECRET_KEY),
            ("delete", SERVICE_NAME, KEY_SECRET_KEY),
        ]

    def test_custom_env_var(self, monkeypatch):
        monkeypatch.setenv("CI_TRADING_SECRET", "ci-secret")
        store = EnvOverrideSecretStore(MemorySecretStore(), env_var="CI_TRADING_SECRET")

        assert store.get(SERVICE_NAME, KEY_SECRET_KEY) == "ci-secret"


class TestDefaultSecretStore:
    def test_wraps_keyring_with_env_override(self):
        store = default_secret_store()

        assert isinstance(store, EnvOverrideSecretStore)
        assert isinstance(store.backend, KeyringSecretStore)
