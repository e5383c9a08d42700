"""
Widget configuration.

Values passed explicitly win; anything left unset falls back to the
``STREAMCHAT_*`` environment variables.
"""

from dataclasses import dataclass, field
import os

from ._http import DEFAULT_USER_AGENT

ENV_CHAT_ID = "STREAMCHAT_CHAT_ID"
ENV_SESSION_URL = "STREAMCHAT_SESSION_URL"
ENV_STREAM_URL = "STREAMCHAT_STREAM_URL"
ENV_TIMEOUT = "STREAMCHAT_TIMEOUT"


@dataclass
class WidgetText:
    """User-visible system strings."""

    initializing: str = "Initializing chat session..."
    session_started: str = "Chat session started."
    session_failed: str = "Failed to start chat session: {error}"
    config_error: str = "Chat initialization failed: Configuration error."
    initializing_before_send: str = "Initializing session before sending..."
    init_failed_before_send: str = "Session initialization failed. Cannot send message."
    not_initialized: str = "Session not initialized. Please try again."
    stream_not_configured: str = "Chat stream endpoint not configured."
    stream_connect_failed: str = "Failed to connect to stream"
    connection_error: str = "Connection error during streaming."
    error_prefix: str = "Error: {error}"
    unknown_error: str = "An unknown error occurred."


@dataclass
class WidgetConfig:
    """Endpoints and identifiers for one widget instance."""

    chat_id: str = ""
    session_endpoint_url: str = ""
    backend_stream_url: str = ""
    timeout: float | None = None
    user_agent: str = DEFAULT_USER_AGENT
    text: WidgetText = field(default_factory=WidgetText)

    @classmethod
    def from_env(
        cls,
        chat_id: str | None = None,
        session_endpoint_url: str | None = None,
        backend_stream_url: str | None = None,
        timeout: float | None = None,
        **kwargs: object,
    ) -> "WidgetConfig":
        """Build a config from arguments, falling back to environment variables."""
        if timeout is None:
            raw_timeout = os.environ.get(ENV_TIMEOUT)
            if raw_timeout:
                try:
                    timeout = float(raw_timeout)
                except ValueError:
                    raise ValueError(
                        f"{ENV_TIMEOUT} must be a number of seconds, got {raw_timeout!r}"
                    ) from None

        return cls(
            chat_id=chat_id or os.environ.get(ENV_CHAT_ID, ""),
            session_endpoint_url=session_endpoint_url or os.environ.get(ENV_SESSION_URL, ""),
            backend_stream_url=backend_stream_url or os.environ.get(ENV_STREAM_URL, ""),
            timeout=timeout,
            **kwargs,  # type: ignore[arg-type]
        )
