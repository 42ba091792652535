"""Authentication core for the Public.com trading CLI.

This package provides:
- Secret storage in the OS keychain with a PUB_SECRET_KEY override
- Secret -> access token exchange and a local token cache
- A thin HTTP client that refreshes the token once on 401

Trading commands only need `get_auth_token` and `PublicClient.from_store`.
"""

__version__ = "0.1.0"

__all__ = ["auth", "client", "config", "keystore"]
