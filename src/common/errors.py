from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .payloads import Body


class AntekhubError(RuntimeError):
    """Base error for the ANTEKHUB client."""


class AuthenticationRequiredError(AntekhubError):
    """No session token is stored; raised before any network call."""


class MissingIdentifierError(AntekhubError, ValueError):
    """A required record identifier was empty; raised before any network call."""


class ApiError(AntekhubError):
    """Server answered with a non-2xx status.

    The message favours the server-supplied detail over a generic status line.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        reason: str = "",
        body: Optional["Body"] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.reason = reason
        self.body = body


__all__ = [
    "AntekhubError",
    "AuthenticationRequiredError",
    "MissingIdentifierError",
    "ApiError",
]
