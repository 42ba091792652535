from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Token:
    """Short-lived API access token.

    Attributes:
        access_token: Bearer credential sent with API calls.
        expires_at: Unix timestamp (seconds) after which the token is expired.
    """

    access_token: str
    expires_at: int

    def is_valid(self, now: float | None = None) -> bool:
        """True while `expires_at` is strictly in the future."""
        if now is None:
            now = time.time()
        return self.expires_at > now

    def expires_in_seconds(self, now: float | None = None) -> int:
        """Seconds until expiry, never negative."""
        if now is None:
            now = time.time()
        return max(0, int(self.expires_at - now))

    def to_dict(self) -> dict[str, Any]:
        return {"access_token": self.access_token, "expires_at": self.expires_at}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Token:
        """Create a Token from its cached form.

        Raises:
            KeyError: If a field is missing
            TypeError: If a field has the wrong type
            ValueError: If the access token is empty
        """
        access_token = data["access_token"]
        expires_at = data["expires_at"]
        if not isinstance(access_token, str):
            raise TypeError("access_token must be a string")
        if not access_token:
            raise ValueError("access_token is empty")
        # bool is an int subclass; reject it explicitly
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise TypeError("expires_at must be a number")
        return cls(access_token=access_token, expires_at=int(expires_at))
