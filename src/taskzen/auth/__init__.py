"""Session authentication."""

from taskzen.auth.session import (
    AccessTokenProvider,
    SessionTokenProvider,
    StaticTokenProvider,
    auth_headers,
)

__all__ = [
    "AccessTokenProvider",
    "SessionTokenProvider",
    "StaticTokenProvider",
    "auth_headers",
]
