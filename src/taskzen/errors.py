"""Error taxonomy shared by the task client, the actions and the suggestion flows."""

from __future__ import annotations


class TaskZenError(Exception):
    """Base class for every failure an action may report to the user."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(TaskZenError):
    """Bad input, detected before any network call."""

    kind = "validation"


class AuthError(TaskZenError):
    """Missing, expired or rejected session credential."""

    kind = "auth"


class TransportError(TaskZenError):
    """Non-success HTTP response or a network failure."""

    kind = "transport"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FlowParseError(TaskZenError):
    """Model output did not match the expected suggestion schema."""

    kind = "flow_parse"
