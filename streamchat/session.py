"""
Session bootstrap.

Exchanges the configured chat id for a session token before any streaming
request can be made.
"""

from dataclasses import dataclass
from enum import Enum
import logging

from ._exceptions import ChatWidgetError, ConfigError, SessionError
from ._http import HTTPClient
from .config import WidgetConfig

logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    """Lifecycle of a widget session."""

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


@dataclass
class SessionState:
    """Session credentials for one widget instance."""

    token: str | None = None
    assistant_id: str | None = None
    status: SessionStatus = SessionStatus.UNINITIALIZED

    @property
    def is_ready(self) -> bool:
        return self.status == SessionStatus.READY and bool(self.token)

    def fail(self) -> None:
        self.token = None
        self.assistant_id = None
        self.status = SessionStatus.FAILED


class SessionBootstrap:
    """Obtains and holds the session token for a widget."""

    def __init__(self, config: WidgetConfig, http: HTTPClient):
        self._config = config
        self._http = http
        self.state = SessionState()

    def check_config(self) -> None:
        """Raise ConfigError unless chat id and session endpoint are both set."""
        if not self._config.chat_id or not self._config.session_endpoint_url:
            raise ConfigError("Missing chat_id or session_endpoint_url in config.")

    def init_session(self) -> SessionState:
        """
        Establish a session, unless one is already Ready.

        Returns:
            The (Ready) session state.

        Raises:
            ConfigError: chat id or session endpoint URL is missing
            HttpError: the endpoint answered non-2xx
            SessionError: the 2xx body carried no usable token
            TransportError: the request could not be sent
        """
        if self.state.is_ready:
            return self.state

        try:
            self.check_config()
        except ConfigError:
            self.state.fail()
            raise

        self.state.status = SessionStatus.INITIALIZING
        url = self._config.session_endpoint_url
        try:
            try:
                data = self._http.post_json(url, {"chatid": self._config.chat_id})
            except ValueError as e:
                raise SessionError(
                    "Session endpoint returned invalid JSON", method="POST", url=url
                ) from e

            token = data.get("session_token") if isinstance(data, dict) else None
            if not token:
                raise SessionError(
                    "Session response missing session_token", method="POST", url=url
                )

            self.state.token = str(token)
            self.state.assistant_id = data.get("assistant_id")
            self.state.status = SessionStatus.READY
        except ChatWidgetError as e:
            logger.warning("Session initialization failed: %s", e.message)
            raise
        finally:
            if self.state.status != SessionStatus.READY:
                self.state.fail()

        logger.debug("Session ready (assistant_id=%s)", self.state.assistant_id)
        return self.state
