"""`pub` command-line entry point for the authentication commands.

Trading commands live elsewhere and only use `get_auth_token` and
`PublicClient.from_store`; this module covers setup and diagnostics.
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import re
import sys

from pubcli.auth import (
    AuthError,
    CacheCorruptError,
    CacheMissingError,
    CacheWriteError,
    SessionProvider,
    clear_token,
    exchange_token,
    load_token,
    read_secret,
    save_token,
    token_cache_path,
)
from pubcli.config import ENV_API_BASE_URL, Config, ConfigError, load_config, save_config
from pubcli.keystore import (
    ENV_SECRET_KEY,
    KEY_SECRET_KEY,
    SERVICE_NAME,
    EnvOverrideSecretStore,
    SecretBackendError,
    SecretNotFoundError,
    SecretStore,
    SecretStoreError,
    default_secret_store,
)
from pubcli.utils.env import load_env_file_if_present

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")


class CommandError(Exception):
    pass


def _is_interactive() -> bool:
    return sys.stdin.isatty()


def cmd_configure(args: argparse.Namespace, store: SecretStore) -> int:
    if args.account_uuid and not UUID_PATTERN.match(args.account_uuid):
        raise CommandError("invalid account UUID format")

    if args.clear:
        store.delete(SERVICE_NAME, KEY_SECRET_KEY)
        clear_token(token_cache_path())
        print("Secret key cleared successfully.")
        return 0

    if not _is_interactive():
        raise CommandError(
            "configure requires an interactive terminal\n"
            f"For scripts and CI set {ENV_SECRET_KEY} instead"
        )

    secret = getpass.getpass("Enter your secret key: ").strip()
    if not secret:
        raise CommandError("secret key cannot be empty")

    try:
        file_config = load_config(apply_env=False)
    except ConfigError as e:
        logger.warning(f"Replacing unreadable configuration: {e}")
        file_config = Config()
    api_url = args.api_url or os.environ.get(ENV_API_BASE_URL) or file_config.api_base_url

    # Validate the secret before storing it
    try:
        token = exchange_token(
            secret,
            api_url=api_url,
            validity_minutes=file_config.token_validity_minutes,
        )
    except AuthError as e:
        raise CommandError(f"failed to validate secret key: {e}") from e

    store.set(SERVICE_NAME, KEY_SECRET_KEY, secret)
    try:
        save_token(token_cache_path(), token)
    except CacheWriteError as e:
        logger.warning(f"Could not cache access token: {e}")

    if args.account_uuid:
        file_config.account_uuid = args.account_uuid
    if args.api_url:
        file_config.api_base_url = args.api_url
    path = save_config(file_config)
    print(f"Configuration saved successfully! ({path})")
    return 0


def cmd_token(args: argparse.Namespace, store: SecretStore) -> int:
    config = load_config()
    provider = SessionProvider(
        secret=read_secret(store),
        api_url=config.api_base_url,
        cache_path=token_cache_path(),
        validity_minutes=config.token_validity_minutes,
    )
    token = provider.get_token(force_refresh=args.refresh)
    summary = {
        "ok": True,
        "token_prefix": token.access_token[:8] + "...",
        "len": len(token.access_token),
        "expires_in": token.expires_in_seconds(),
    }
    print(json.dumps(summary))
    return 0


def _secret_status(store: SecretStore) -> str:
    if isinstance(store, EnvOverrideSecretStore) and store.env_override() is not None:
        return f"from {store.env_var}"
    try:
        store.get(SERVICE_NAME, KEY_SECRET_KEY)
    except SecretNotFoundError:
        return "not configured"
    except SecretBackendError as e:
        return f"keyring unavailable ({e})"
    return "configured"


def _cache_status() -> str:
    try:
        token = load_token(token_cache_path())
    except CacheMissingError:
        return "none"
    except CacheCorruptError:
        return "corrupt (will be replaced)"
    if token.is_valid():
        return f"valid for {token.expires_in_seconds()} seconds"
    return "expired"


def cmd_status(args: argparse.Namespace, store: SecretStore) -> int:
    config = load_config()
    print("Current Configuration:")
    print("----------------------")
    print(f"Secret key: {_secret_status(store)}")
    print(f"Default account: {config.account_uuid or 'Not set'}")
    print(f"API base URL: {config.api_base_url}")
    print(f"Token validity: {config.token_validity_minutes} minutes")
    print(f"Token cache: {token_cache_path()} ({_cache_status()})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pub", description="Public.com trading CLI authentication")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--env-file",
        default=".env",
        help=f"Load variables such as {ENV_SECRET_KEY} from this file if present (default: .env)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    configure = sub.add_parser("configure", help="Store the API secret key in the OS keychain")
    configure.add_argument("--clear", action="store_true", help="Remove the stored secret and cached token")
    configure.add_argument("--account-uuid", dest="account_uuid", default=None, help="Default account UUID")
    configure.add_argument("--api-url", dest="api_url", default=None, help="API base URL to store")
    configure.set_defaults(func=cmd_configure)

    token = sub.add_parser("token", help="Obtain an access token and print a summary")
    token.add_argument("--refresh", action="store_true", help="Ignore the cached token")
    token.set_defaults(func=cmd_token)

    status = sub.add_parser("status", help="Show configuration and token cache state")
    status.set_defaults(func=cmd_status)
    return parser


def main(argv: list[str] | None = None, store: SecretStore | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    load_env_file_if_present(args.env_file)

    if store is None:
        store = default_secret_store()
    try:
        return args.func(args, store)
    except (AuthError, ConfigError, SecretStoreError, CommandError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
