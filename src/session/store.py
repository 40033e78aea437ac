from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from cryptography.fernet import Fernet, InvalidToken

from .models import CURRENT_USER_KEY, TOKEN_KEY, Session


# Environment variable names for convenience configuration
ENV_SESSION_FILE = "ANTEKHUB_SESSION_FILE"
ENV_FERNET_KEY = "ANTEKHUB_FERNET_KEY"
ENV_TOKEN = "ANTEKHUB_TOKEN"


def _to_fernet(key: str | bytes) -> Fernet:
    """Build a Fernet from a urlsafe base64 32-byte key (str or bytes)."""
    if isinstance(key, str):
        key = key.encode("utf-8")
    return Fernet(key)


class SessionStore:
    """
    Small key-value store for the session token and cached user profile.

    - `path=None`: values live in memory for the lifetime of the object.
    - With a `path`, the store is a single JSON object on disk, loaded lazily
      on first access and rewritten after every mutation. A missing or
      corrupt (unparseable) file yields an empty store.
    - With a `fernet_key`, the file is encrypted at rest. A file that cannot
      be decrypted with the key raises ValueError rather than being discarded.

    The client reads the token before every request; only logout and
    `save_session` write to it.
    """

    def __init__(
        self,
        path: Optional[os.PathLike[str] | str] = None,
        *,
        fernet_key: Optional[str | bytes] = None,
    ) -> None:
        self._path = Path(path) if path else None
        self._fernet = _to_fernet(fernet_key) if fernet_key else None
        self._data: Dict[str, Any] = {}
        self._loaded = self._path is None

    # -------- Construction helpers --------
    @classmethod
    def from_env(cls) -> "SessionStore":
        path = os.environ.get(ENV_SESSION_FILE) or None
        fkey = os.environ.get(ENV_FERNET_KEY) or None
        store = cls(path, fernet_key=fkey)
        token = os.environ.get(ENV_TOKEN)
        if token:
            # Held in memory only; the session file is not rewritten
            store._ensure_loaded()
            store._data[TOKEN_KEY] = token
        return store

    @classmethod
    def with_token(cls, token: str) -> "SessionStore":
        """In-memory store seeded with a token."""
        store = cls()
        store.set(TOKEN_KEY, token)
        return store

    # -------- Key-value operations --------
    def get(self, key: str) -> Any:
        self._ensure_loaded()
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._ensure_loaded()
        self._data[key] = value
        self._save()

    def remove(self, key: str) -> None:
        self._ensure_loaded()
        if key in self._data:
            del self._data[key]
            self._save()

    # -------- Session helpers --------
    @property
    def token(self) -> Optional[str]:
        val = self.get(TOKEN_KEY)
        return val if isinstance(val, str) and val else None

    def load(self) -> Session:
        user = self.get(CURRENT_USER_KEY)
        return Session(token=self.token, current_user=user if isinstance(user, dict) else None)

    def save_session(self, token: str, current_user: Optional[Dict[str, Any]] = None) -> None:
        """Record the result of an external login."""
        if not token:
            raise ValueError("token is required")
        self._ensure_loaded()
        self._data[TOKEN_KEY] = token
        if current_user is not None:
            self._data[CURRENT_USER_KEY] = current_user
        self._save()

    def clear(self) -> None:
        self.remove(TOKEN_KEY)
        self.remove(CURRENT_USER_KEY)

    # -------- Persistence --------
    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        if self._path is None or not self._path.exists():
            return
        raw = self._path.read_bytes()
        if self._fernet is not None:
            try:
                raw = self._fernet.decrypt(raw)
            except InvalidToken as ex:
                raise ValueError(f"Failed to decrypt session file: {self._path}") from ex
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            # Corrupt session file: start logged out
            data = {}
        if isinstance(data, dict):
            self._data = {str(k): v for k, v in data.items()}

    def _save(self) -> None:
        if self._path is None:
            return
        payload = json.dumps(self._data, separators=(",", ":"), sort_keys=True).encode("utf-8")
        if self._fernet is not None:
            payload = self._fernet.encrypt(payload)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(payload)


__all__ = ["SessionStore", "ENV_SESSION_FILE", "ENV_FERNET_KEY", "ENV_TOKEN"]
