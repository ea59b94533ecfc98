"""
HTTP client for the StoreHub REST backend.

Wraps a requests.Session with:
- Bearer token injection from the injected SessionStore
- One transparent token refresh + retry on HTTP 401
- Error mapping: transport failures -> TransportError, non-2xx -> ApiError
  carrying the body's ``error``/``detail`` message when there is one

All methods are blocking; async adapters call them through
asyncio.to_thread so the event loop never waits on the network.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from ...domain.exceptions import ApiError, EnvelopeError, SessionExpiredError, TransportError
from ...domain.interfaces.session_store import SessionStore
from ...utils.logging_setup import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "API request failed"


class ApiClient:
    """Blocking JSON client bound to one API base URL."""

    def __init__(
        self,
        base_url: str,
        session_store: SessionStore,
        timeout_sec: float = 10.0,
        refresh_path: str = "/auth/token/refresh/",
        http: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. "http://localhost:8000/api".
            session_store: Source of access/refresh tokens.
            timeout_sec: Per-request timeout.
            refresh_path: Token refresh endpoint relative to base_url.
            http: Optional pre-built requests.Session (tests inject a mock).
        """
        self.base_url = base_url.rstrip("/")
        self.session_store = session_store
        self.timeout_sec = timeout_sec
        self.refresh_path = refresh_path
        self._http = http or requests.Session()

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def close(self) -> None:
        self._http.close()

    # -------------------------------------------------------------------------
    # Public verbs
    # -------------------------------------------------------------------------

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json_body: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", path, json_body=json_body)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body (None when empty).

        Raises:
            TransportError: No response (connection refused, timeout, ...).
            SessionExpiredError: 401 and the token could not be refreshed.
            ApiError: Any other non-2xx response.
            EnvelopeError: 2xx response whose body is not JSON.
        """
        response = self._send(method, path, params, json_body)

        if response.status_code == 401:
            logger.info(f"{method} {path} returned 401, refreshing access token")
            self._refresh_access_token()
            response = self._send(method, path, params, json_body)

        if not response.ok:
            message = self.error_message(response)
            logger.warning(f"{method} {path} failed: HTTP {response.status_code} {message}")
            raise ApiError(response.status_code, message, payload=self._safe_json(response))

        return self._decode(response, method, path)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _headers(self, with_auth: bool = True) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self.session_store.get_access_token() if with_auth else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]],
        json_body: Optional[Dict[str, Any]],
        with_auth: bool = True,
    ) -> requests.Response:
        url = self.url_for(path)
        try:
            return self._http.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=self._headers(with_auth),
                timeout=self.timeout_sec,
            )
        except requests.RequestException as e:
            logger.warning(f"{method} {url} transport failure: {e}")
            raise TransportError(f"{method} {path}: {e}") from e

    def _refresh_access_token(self) -> str:
        """Exchange the refresh token for a new access token, or end the session."""
        refresh = self.session_store.get_refresh_token()
        if not refresh:
            self.session_store.clear_session()
            raise SessionExpiredError("No refresh token available")

        # A TransportError here propagates and keeps the session intact
        response = self._send(
            "POST", self.refresh_path, None, {"refresh": refresh}, with_auth=False
        )

        body = self._safe_json(response) if response.ok else None
        access = body.get("access") if isinstance(body, dict) else None
        if not access:
            logger.warning(f"Token refresh failed: HTTP {response.status_code}")
            self.session_store.clear_session()
            raise SessionExpiredError("Session expired")

        self.session_store.set_session(access, refresh_token=body.get("refresh"))
        logger.info("Access token refreshed")
        return access

    @staticmethod
    def _safe_json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    @classmethod
    def error_message(cls, response: requests.Response) -> str:
        """Message from a JSON error body, else the generic fallback."""
        body = cls._safe_json(response)
        if isinstance(body, dict):
            for key in ("error", "detail", "message"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        return GENERIC_ERROR_MESSAGE

    @staticmethod
    def _decode(response: requests.Response, method: str, path: str) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise EnvelopeError(f"{method} {path}: response body is not JSON") from e
