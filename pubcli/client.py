from __future__ import annotations

import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .auth import API_URL, TokenRefresher, get_auth_token, make_token_refresher
from .keystore import SecretStore

logger = logging.getLogger(__name__)


class APIError(RuntimeError):
    """Error response (status >= 400) from the trading API."""

    def __init__(self, status_code: int, message: str = "", code: str = ""):
        self.status_code = status_code
        self.message = message
        self.code = code
        if not message:
            try:
                message = HTTPStatus(status_code).phrase
            except ValueError:
                message = "unknown error"
        super().__init__(f"API error ({status_code}): {message}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == HTTPStatus.NOT_FOUND

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == HTTPStatus.UNAUTHORIZED

    @property
    def is_forbidden(self) -> bool:
        return self.status_code == HTTPStatus.FORBIDDEN


class UnauthorizedError(APIError):
    """Final 401: no refresher configured, or the refreshed token was rejected too."""

    def __init__(self, message: str = "", code: str = ""):
        super().__init__(int(HTTPStatus.UNAUTHORIZED), message, code)


class APINetworkError(RuntimeError):
    pass


def _error_fields(res: requests.Response) -> tuple[str, str]:
    """Pull (message, code) out of an error body, preferring `error` over `message`."""
    try:
        payload = res.json()
    except ValueError:
        return "", ""
    if not isinstance(payload, dict):
        return "", ""
    message = payload.get("error") or payload.get("message") or ""
    code = payload.get("code") or ""
    return str(message), str(code)


def check_response(res: requests.Response) -> None:
    """Raise APIError for an error response, do nothing for 2xx/3xx."""
    if res.status_code < 400:
        return
    message, code = _error_fields(res)
    if res.status_code == HTTPStatus.UNAUTHORIZED:
        raise UnauthorizedError(message, code)
    raise APIError(res.status_code, message, code)


def _session_without_retries() -> requests.Session:
    sess = requests.Session()
    # The 401 refresh in PublicClient.request is the only resend a call may make
    retries = Retry(total=0, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retries)
    sess.mount("http://", adapter)
    sess.mount("https://", adapter)
    return sess


def build_auth_headers(auth_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {auth_token}"}


@dataclass
class PublicClient:
    """HTTP client for the trading API that self-heals a stale token.

    A 401 on the first attempt makes the client call `token_refresher` once
    and resend the identical request with the new token. A second 401, or a
    401 without a refresher, raises UnauthorizedError.
    """

    auth_token: str = field(repr=False)
    api_url: str = API_URL
    timeout: float = 30.0
    token_refresher: TokenRefresher | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.api_url = self.api_url.rstrip("/")
        self.session = _session_without_retries()

    @property
    def headers(self) -> dict[str, str]:
        return build_auth_headers(self.auth_token)

    @classmethod
    def from_store(cls, store: SecretStore, api_url: str = API_URL, **provider_kwargs: Any) -> PublicClient:
        """Authenticate from the secret store and wire up 401 refresh.

        `provider_kwargs` (cache_path, validity_minutes, timeout) are passed to
        both the initial token lookup and the refresher.
        """
        token = get_auth_token(store, api_url, False, **provider_kwargs)
        refresher = make_token_refresher(store, api_url, **provider_kwargs)
        timeout = provider_kwargs.get("timeout", 30.0)
        return cls(auth_token=token, api_url=api_url, timeout=timeout, token_refresher=refresher)

    def _send_once(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None,
        json: Any,
    ) -> requests.Response:
        try:
            return self.session.request(
                method,
                url,
                params=params or {},
                json=json,
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise APINetworkError(f"request failed: {method} {url}: {e}") from e

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> requests.Response:
        """Send an authenticated request, retrying once after a 401.

        Raises:
            UnauthorizedError: If the final response is 401
            APINetworkError: On connection failure or timeout
        """
        url = f"{self.api_url}{path}"
        res = self._send_once(method, url, params, json)
        if res.status_code != HTTPStatus.UNAUTHORIZED:
            return res

        if self.token_refresher is None:
            check_response(res)  # raises UnauthorizedError

        logger.info(f"{method} {path} returned 401, refreshing access token")
        res.close()
        # Refresh failures (exchange, keychain, network) propagate to the caller
        self.auth_token = self.token_refresher()
        res = self._send_once(method, url, params, json)
        if res.status_code == HTTPStatus.UNAUTHORIZED:
            logger.warning(f"{method} {path} still unauthorized after token refresh")
            check_response(res)  # raises UnauthorizedError
        return res

    def get(self, path: str, params: dict[str, Any] | None = None) -> requests.Response:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> requests.Response:
        return self.request("POST", path, json=json)

    def delete(self, path: str) -> requests.Response:
        return self.request("DELETE", path)

    def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET `path`, raise APIError on failure, return the decoded body."""
        res = self.get(path, params=params)
        check_response(res)
        return res.json()
