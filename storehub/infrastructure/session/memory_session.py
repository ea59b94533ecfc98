"""In-memory session store (tests, one-shot CLI runs with a token from config)."""

from __future__ import annotations

from typing import Any, Dict, Optional

from ...domain.interfaces.session_store import SessionStore


class MemorySessionStore(SessionStore):
    """Session kept in process memory only."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        user: Optional[Dict[str, Any]] = None,
    ):
        self._state: Dict[str, Any] = {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "user": user,
        }
        self._preferences: Dict[str, str] = {}

    def get_access_token(self) -> Optional[str]:
        return self._state["access_token"]

    def get_refresh_token(self) -> Optional[str]:
        return self._state["refresh_token"]

    def get_user(self) -> Optional[Dict[str, Any]]:
        return self._state["user"]

    def set_session(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
        user: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._state["access_token"] = access_token
        if refresh_token is not None:
            self._state["refresh_token"] = refresh_token
        if user is not None:
            self._state["user"] = user

    def clear_session(self) -> None:
        self._state = {"access_token": None, "refresh_token": None, "user": None}

    def get_preference(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._preferences.get(key, default)

    def set_preference(self, key: str, value: str) -> None:
        self._preferences[key] = value
