from __future__ import annotations

import logging
import time

import requests

from .errors import AuthNetworkError, ExchangeError, ExchangeProtocolError
from .token import Token

logger = logging.getLogger(__name__)

API_URL = "https://api.public.com"
EXCHANGE_PATH = "/userapiauthservice/personal/access-tokens"

DEFAULT_VALIDITY_MINUTES = 60
DEFAULT_TIMEOUT = 30.0

# Longest error body excerpt carried by ExchangeError
MAX_ERROR_BODY = 512


def _body_excerpt(res: requests.Response) -> str:
    text = (res.text or "").strip()
    if len(text) > MAX_ERROR_BODY:
        return text[:MAX_ERROR_BODY] + "..."
    return text


def _validity_seconds(data: dict, validity_minutes: int) -> int:
    """Server-provided `expiresIn` if present, else the requested window."""
    expires_in = data.get("expiresIn")
    if expires_in is None:
        return validity_minutes * 60
    if isinstance(expires_in, bool) or not isinstance(expires_in, int) or expires_in <= 0:
        raise ExchangeProtocolError(f"invalid expiresIn in exchange response: {expires_in!r}")
    return expires_in


def exchange_token(
    secret: str,
    api_url: str = API_URL,
    validity_minutes: int = DEFAULT_VALIDITY_MINUTES,
    timeout: float = DEFAULT_TIMEOUT,
    session: requests.Session | None = None,
    now: float | None = None,
) -> Token:
    """Exchange the long-lived secret for a short-lived access token.

    POSTs `{"secret": ..., "validityInMinutes": ...}` as JSON to
    /userapiauthservice/personal/access-tokens and reads `accessToken` (and
    optionally `expiresIn`, in seconds) from the JSON response.

    No retries happen here; the caller decides whether to try again.

    Raises:
        ValueError: If validity_minutes is not positive
        AuthNetworkError: On connection failure or timeout
        ExchangeError: On a non-2xx response
        ExchangeProtocolError: If the response cannot be used
    """
    if validity_minutes <= 0:
        raise ValueError("validity_minutes must be positive")

    url = f"{api_url.rstrip('/')}{EXCHANGE_PATH}"
    payload = {"secret": secret, "validityInMinutes": validity_minutes}
    post = session.post if session is not None else requests.post
    try:
        res = post(url, json=payload, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise AuthNetworkError(f"token exchange request failed: {e}") from e

    if not 200 <= res.status_code < 300:
        logger.debug(f"Token exchange rejected with status {res.status_code}")
        raise ExchangeError(res.status_code, _body_excerpt(res))

    try:
        data = res.json()
    except ValueError as e:
        raise ExchangeProtocolError(f"failed to decode response: {e}") from e
    if not isinstance(data, dict):
        raise ExchangeProtocolError("failed to decode response: expected a JSON object")

    access_token = data.get("accessToken")
    if not isinstance(access_token, str) or not access_token:
        raise ExchangeProtocolError("empty access token in exchange response")

    if now is None:
        now = time.time()
    expires_at = int(now) + _validity_seconds(data, validity_minutes)
    logger.debug(f"Obtained access token valid for {expires_at - int(now)} seconds")
    return Token(access_token=access_token, expires_at=expires_at)
