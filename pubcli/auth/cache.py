"""On-disk cache for the most recently obtained access token.

The cache holds at most one token, stored as JSON
`{"access_token": ..., "expires_at": ...}` with owner-only permissions.
Concurrent CLI invocations may both refresh and overwrite it; the last
writer wins and every writer still holds a usable token.
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path

from .errors import CacheClearError, CacheCorruptError, CacheMissingError, CacheWriteError
from .token import Token

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = "pub"
TOKEN_CACHE_NAME = ".token_cache"


def config_dir() -> Path:
    """Per-user configuration root.

    $XDG_CONFIG_HOME/pub when the variable is set, ~/.config/pub otherwise.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / CONFIG_DIR_NAME
    return Path.home() / ".config" / CONFIG_DIR_NAME


def token_cache_path() -> Path:
    return config_dir() / TOKEN_CACHE_NAME


def save_token(path: str | Path, token: Token) -> None:
    """Write the token to the cache, replacing any previous one.

    The parent directory is created with mode 0700 and the file is written
    with mode 0600 through a temp file that is renamed over the target.

    Raises:
        CacheWriteError: If the directory or file cannot be written
    """
    cache_path = Path(path)
    tmp_name: str | None = None
    try:
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        os.chmod(cache_path.parent, stat.S_IRWXU)

        fd, tmp_name = tempfile.mkstemp(prefix=cache_path.name, suffix=".tmp", dir=cache_path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(token.to_dict(), f)
        os.chmod(tmp_name, stat.S_IRUSR | stat.S_IWUSR)
        os.replace(tmp_name, cache_path)
        tmp_name = None
    except OSError as e:
        raise CacheWriteError(f"failed to write token cache {cache_path}: {e}") from e
    finally:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)

    logger.debug(f"Token cached at {cache_path}")


def load_token(path: str | Path) -> Token:
    """Read the cached token.

    Raises:
        CacheMissingError: If there is no cache file
        CacheCorruptError: If the file cannot be read or parsed into a Token
    """
    cache_path = Path(path)
    try:
        raw = cache_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise CacheMissingError(f"no token cache at {cache_path}") from e
    except OSError as e:
        raise CacheCorruptError(f"unreadable token cache {cache_path}: {e}") from e

    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise TypeError("cache record is not a JSON object")
        return Token.from_dict(data)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise CacheCorruptError(f"invalid token cache {cache_path}: {e}") from e


def clear_token(path: str | Path) -> None:
    """Remove the cache file; a missing file is not an error.

    Raises:
        CacheClearError: If the path exists but cannot be removed
    """
    cache_path = Path(path)
    try:
        cache_path.unlink()
    except FileNotFoundError:
        return
    except OSError as e:
        raise CacheClearError(f"failed to clear token cache {cache_path}: {e}") from e
    logger.debug(f"Cleared token cache {cache_path}")
