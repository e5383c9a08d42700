"""Thin HTTP client wrapping requests.Session with JSON bodies and error mapping."""

import logging
from typing import Any

import requests

from ._exceptions import HttpError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "streamchat-python/0.1.0"


def _error_detail(resp: requests.Response, default: str | None = None) -> str:
    """
    Error message for a non-2xx response.

    A JSON body yields its ``detail`` field, else ``default``. The reason
    phrase is only used when the body is not JSON.
    """
    fallback = default or f"HTTP {resp.status_code}"
    try:
        body = resp.json()
    except ValueError:
        logger.debug("Failed to parse error body: %s", resp.text[:200] if resp.text else "empty")
        return resp.reason or fallback
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return fallback


def _raise_for_status(resp: requests.Response, *, method: str = "", url: str = "") -> None:
    """Map HTTP error responses to HttpError."""
    if resp.ok:
        return
    detail = _error_detail(resp)
    resp.close()
    raise HttpError(detail, status_code=resp.status_code, method=method, url=url)


class HTTPClient:
    """Minimal JSON-over-HTTP client. One attempt per call, no retries."""

    def __init__(self, timeout: float | None = None, user_agent: str = DEFAULT_USER_AGENT):
        self._session = requests.Session()
        self._session.headers["Content-Type"] = "application/json"
        self._session.headers["User-Agent"] = user_agent
        self._timeout = timeout

    def _send(
        self, method: str, url: str, payload: dict[str, Any], *, is_stream: bool = False
    ) -> requests.Response:
        logger.debug("%s %s (stream=%s)", method, url, is_stream)
        try:
            return self._session.request(
                method, url, json=payload, timeout=self._timeout, stream=is_stream
            )
        except requests.RequestException as e:
            raise TransportError(str(e), method=method, url=url) from e

    def post_json(self, url: str, payload: dict[str, Any]) -> Any:
        """POST a JSON body and return the decoded JSON response."""
        resp = self._send("POST", url, payload)
        _raise_for_status(resp, method="POST", url=url)
        return resp.json()

    def open_stream(self, url: str, payload: dict[str, Any]) -> requests.Response:
        """POST with stream=True. Status is left for the caller to inspect."""
        return self._send("POST", url, payload, is_stream=True)

    def close(self) -> None:
        self._session.close()
