from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# Keys used in the session key-value store
TOKEN_KEY = "authToken"
CURRENT_USER_KEY = "currentUser"


class Session(BaseModel):
    """
    Logical view of the session key-value store.

    Fields
    - token: bearer token issued by the login flow (None when logged out).
    - current_user: cached profile of the logged-in user, as returned by the
      server. Opaque to this client.
    """

    token: Optional[str] = Field(default=None, description="Bearer token")
    current_user: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Cached user profile",
    )

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @classmethod
    def empty(cls) -> "Session":
        return cls()
