from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from pubcli.keystore import (
    ENV_SECRET_KEY,
    KEY_SECRET_KEY,
    SERVICE_NAME,
    SecretBackendError,
    SecretNotFoundError,
    SecretStore,
)

from .cache import clear_token, load_token, save_token, token_cache_path
from .errors import (
    CacheCorruptError,
    CacheMissingError,
    CacheWriteError,
    ExchangeProtocolError,
    SecretBackendUnavailableError,
    SecretNotConfiguredError,
)
from .exchange import API_URL, DEFAULT_TIMEOUT, DEFAULT_VALIDITY_MINUTES, exchange_token
from .token import Token

logger = logging.getLogger(__name__)

# Zero-argument callback returning a freshly exchanged access token
TokenRefresher = Callable[[], str]

NOT_CONFIGURED_MESSAGE = (
    f"CLI not configured. Run: pub configure\nOr set {ENV_SECRET_KEY} environment variable"
)


@dataclass
class SessionProvider:
    """Hands out usable access tokens, preferring the on-disk cache.

    A valid cached token is returned without any network call. A missing,
    expired or corrupt cache, or `force_refresh=True`, triggers one exchange
    whose result is cached on a best-effort basis.
    """

    secret: str = field(repr=False)
    api_url: str = API_URL
    cache_path: Path = field(default_factory=token_cache_path)
    validity_minutes: int = DEFAULT_VALIDITY_MINUTES
    timeout: float = DEFAULT_TIMEOUT
    exchange: Callable[..., Token] = exchange_token
    clock: Callable[[], float] = time.time

    def __post_init__(self) -> None:
        self.cache_path = Path(self.cache_path)

    def _cached_token(self, now: float) -> Token | None:
        try:
            token = load_token(self.cache_path)
        except CacheMissingError:
            logger.debug("No cached token")
            return None
        except CacheCorruptError as e:
            logger.debug(f"Ignoring corrupt token cache: {e}")
            return None
        if not token.is_valid(now):
            logger.debug("Cached token expired")
            return None
        return token

    def get_token(self, force_refresh: bool = False) -> Token:
        """Return a valid token, exchanging the secret when needed.

        Raises:
            AuthNetworkError, ExchangeError, ExchangeProtocolError: From the exchange
        """
        if not force_refresh:
            cached = self._cached_token(self.clock())
            if cached is not None:
                return cached

        now = self.clock()
        token = self.exchange(
            self.secret,
            api_url=self.api_url,
            validity_minutes=self.validity_minutes,
            timeout=self.timeout,
            now=now,
        )
        if not token.is_valid(now):
            raise ExchangeProtocolError("exchange returned an already expired token")
        try:
            save_token(self.cache_path, token)
        except CacheWriteError as e:
            logger.warning(f"Could not cache access token: {e}")
        return token

    def clear(self) -> None:
        """Drop the cached token so the next call exchanges again."""
        clear_token(self.cache_path)


def read_secret(store: SecretStore) -> str:
    """Fetch the API secret from the store.

    Raises:
        SecretNotConfiguredError: If neither the override nor the store has it
        SecretBackendUnavailableError: If the store backend failed
    """
    try:
        return store.get(SERVICE_NAME, KEY_SECRET_KEY)
    except SecretNotFoundError as e:
        raise SecretNotConfiguredError(NOT_CONFIGURED_MESSAGE) from e
    except SecretBackendError as e:
        raise SecretBackendUnavailableError(f"failed to retrieve secret: {e}") from e


def get_auth_token(
    store: SecretStore,
    api_url: str = API_URL,
    force_refresh: bool = False,
    *,
    cache_path: str | Path | None = None,
    validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Return a bearer token for `api_url`, the single entry point for commands.

    Reads the secret from `store`, then defers to SessionProvider for the
    cache-or-exchange decision.
    """
    secret = read_secret(store)
    provider = SessionProvider(
        secret=secret,
        api_url=api_url,
        cache_path=Path(cache_path) if cache_path is not None else token_cache_path(),
        validity_minutes=validity_minutes,
        timeout=timeout,
    )
    return provider.get_token(force_refresh=force_refresh).access_token


def make_token_refresher(
    store: SecretStore,
    api_url: str = API_URL,
    *,
    cache_path: str | Path | None = None,
    validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
    timeout: float = DEFAULT_TIMEOUT,
) -> TokenRefresher:
    """Build the callback a client uses to force a fresh token after a 401."""

    def refresh() -> str:
        return get_auth_token(
            store,
            api_url,
            True,
            cache_path=cache_path,
            validity_minutes=validity_minutes,
            timeout=timeout,
        )

    return refresh
