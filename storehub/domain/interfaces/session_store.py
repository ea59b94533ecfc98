"""Session store interface.

Replaces ambient local-storage reads: the HTTP client receives a
SessionStore and is the only component that reads tokens from it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class SessionStore(ABC):
    """Holds the access/refresh token pair, the user blob and UI preferences."""

    @abstractmethod
    def get_access_token(self) -> Optional[str]:
        pass

    @abstractmethod
    def get_refresh_token(self) -> Optional[str]:
        pass

    @abstractmethod
    def set_session(
        self,
        access_token: str,
        refresh_token: Optional[str] = None,
        user: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Store a new session.

        A None refresh_token or user keeps the currently stored value, so a
        token refresh only needs to pass the new access token.
        """
        pass

    @abstractmethod
    def clear_session(self) -> None:
        """Forget tokens and user. Preferences survive."""
        pass

    @abstractmethod
    def get_user(self) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    def get_preference(self, key: str, default: Optional[str] = None) -> Optional[str]:
        pass

    @abstractmethod
    def set_preference(self, key: str, value: str) -> None:
        pass
