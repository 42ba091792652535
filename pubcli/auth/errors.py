"""Exceptions raised by the authentication core.

Only the errors a command can act on reach the caller of `get_auth_token`:
missing secret, keychain failure, exchange failures and network errors.
Cache errors are recovered internally, except `CacheClearError` which is
raised from an explicit clear.
"""

from __future__ import annotations


class AuthError(RuntimeError):
    pass


class SecretNotConfiguredError(AuthError):
    """No secret available from PUB_SECRET_KEY or the keychain."""

    pass


class SecretBackendUnavailableError(AuthError):
    """The keychain could not be read; the cause is chained."""

    pass


class AuthNetworkError(AuthError):
    """Connection failure or timeout talking to the exchange endpoint."""

    pass


class ExchangeError(AuthError):
    """Non-2xx response from the token exchange endpoint."""

    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        message = f"token exchange failed: {status}"
        if body:
            message = f"{message} {body}"
        super().__init__(message)


class ExchangeProtocolError(AuthError):
    """The exchange response could not be used (bad JSON, empty token)."""

    pass


class CacheError(AuthError):
    pass


class CacheMissingError(CacheError):
    pass


class CacheCorruptError(CacheError):
    pass


class CacheWriteError(CacheError):
    pass


class CacheClearError(CacheError):
    pass
