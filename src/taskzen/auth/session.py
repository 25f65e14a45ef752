"""Session-scoped access to the user's bearer credential.

The only capability the rest of the application needs is "produce authorization
headers or fail with AuthError". Token providers are plain objects so tests can
pass fakes instead of a real session.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from taskzen.errors import AuthError

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = "access_token"
EXPIRES_AT_KEY = "expires_at"
USER_KEY = "user"
LOGIN_STATE_KEY = "login_state"

# Tokens this close to expiry are treated as expired.
_EXPIRY_LEEWAY_SECONDS = 10.0


class AccessTokenProvider(Protocol):
    def access_token(self) -> str: ...


@dataclass(frozen=True, slots=True)
class StaticTokenProvider:
    """Always returns the same token. Useful for scripts and tests."""

    token: str

    def access_token(self) -> str:
        if not self.token.strip():
            raise AuthError("Authentication failed.")
        return self.token


@dataclass(slots=True)
class SessionTokenProvider:
    """Reads the token stored in the signed session cookie by the login callback."""

    session: MutableMapping[str, Any]
    clock: Callable[[], float] = field(default=time.time)

    def access_token(self) -> str:
        token = self.session.get(ACCESS_TOKEN_KEY)
        if not isinstance(token, str) or not token.strip():
            raise AuthError("Not authenticated.")

        expires_at = self.session.get(EXPIRES_AT_KEY)
        if not isinstance(expires_at, int | float):
            return token
        if expires_at - _EXPIRY_LEEWAY_SECONDS <= self.clock():
            logger.info("Session access token expired")
            raise AuthError("Session expired. Please log in again.")
        return token


def auth_headers(provider: AccessTokenProvider) -> dict[str, str]:
    """Return the headers every task API request carries.

    Raises:
        AuthError: if no valid credential is available.
    """

    token = provider.access_token()
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }


def store_login(
    session: MutableMapping[str, Any],
    *,
    access_token: str,
    expires_in: float | None,
    user: dict[str, Any] | None,
    now: float | None = None,
) -> None:
    session[ACCESS_TOKEN_KEY] = access_token
    if expires_in is not None:
        session[EXPIRES_AT_KEY] = (now if now is not None else time.time()) + float(expires_in)
    else:
        session.pop(EXPIRES_AT_KEY, None)
    session[USER_KEY] = user or {}


def current_user(session: MutableMapping[str, Any]) -> dict[str, Any] | None:
    """Return the profile of the logged-in user, or None."""

    if not isinstance(session.get(ACCESS_TOKEN_KEY), str):
        return None
    user = session.get(USER_KEY)
    return user if isinstance(user, dict) else {}


def clear_session(session: MutableMapping[str, Any]) -> None:
    for key in (ACCESS_TOKEN_KEY, EXPIRES_AT_KEY, USER_KEY, LOGIN_STATE_KEY):
        session.pop(key, None)
