"""
JSON-file session store.

Persists the same keys the browser client kept in local storage
(access_token, refresh_token, user, language/theme preferences) so a CLI
session can be rehydrated between runs.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from ...domain.interfaces.session_store import SessionStore
from ...utils.logging_setup import get_logger

logger = get_logger(__name__)

_SESSION_KEYS = ("access_token", "refresh_token", "user")


class FileSessionStore(SessionStore):
    """Session persisted as one JSON document, rewritten on every change."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._data: Dict[str, Any] = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        # Bearer tokens: owner read/write only
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)

    def get_access_token(self) -> Optional[str]:
        return self._data.get("access_token")

    def get_refresh_token(self) -> Optional[str]:
        return self._data.get("refresh_token")

    def get_user(self) -> Optional[Dict[str, Any]]:
        return self._data.get("user")

    def set_session(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
        user: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._data["access_token"] = access_token
        if refresh_token is not None:
            self._data["refresh_token"] = refresh_token
        if user is not None:
            self._data["user"] = user
        self._save()

    def clear_session(self) -> None:
        for key in _SESSION_KEYS:
            self._data.pop(key, None)
        self._save()
        logger.info("Session cleared")

    def get_preference(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._data.get("preferences", {}).get(key, default)

    def set_preference(self, key: str, value: str) -> None:
        self._data.setdefault("preferences", {})[key] = value
        self._save()
