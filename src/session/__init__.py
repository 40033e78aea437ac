"""
Session persistence for the ANTEKHUB client.

Holds the bearer token and the cached user profile in a small key-value
store, optionally backed by a Fernet-encrypted JSON file.
"""

from .models import Session
from .store import SessionStore

__all__ = ["Session", "SessionStore"]
