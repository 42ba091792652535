"""Secret -> access token exchange, token cache and session provider.

Key Components:
- token: Token value type and its validity rule
- exchange: the network call trading the secret for a token
- cache: single-token JSON cache under the per-user config directory
- provider: SessionProvider and the `get_auth_token` entry point
"""

from .cache import clear_token, config_dir, load_token, save_token, token_cache_path
from .errors import (
    AuthError,
    AuthNetworkError,
    CacheClearError,
    CacheCorruptError,
    CacheError,
    CacheMissingError,
    CacheWriteError,
    ExchangeError,
    ExchangeProtocolError,
    SecretBackendUnavailableError,
    SecretNotConfiguredError,
)
from .exchange import API_URL, DEFAULT_VALIDITY_MINUTES, exchange_token
from .provider import (
    SessionProvider,
    TokenRefresher,
    get_auth_token,
    make_token_refresher,
    read_secret,
)
from .token import Token

__all__ = [
    "API_URL",
    "DEFAULT_VALIDITY_MINUTES",
    "AuthError",
    "AuthNetworkError",
    "CacheClearError",
    "CacheCorruptError",
    "CacheError",
    "CacheMissingError",
    "CacheWriteError",
    "ExchangeError",
    "ExchangeProtocolError",
    "SecretBackendUnavailableError",
    "SecretNotConfiguredError",
    "SessionProvider",
    "Token",
    "TokenRefresher",
    "clear_token",
    "config_dir",
    "exchange_token",
    "get_auth_token",
    "load_token",
    "make_token_refresher",
    "read_secret",
    "save_token",
    "token_cache_path",
]
