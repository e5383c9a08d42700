"""Typed error hierarchy for session bootstrap and streaming failures."""


class ChatWidgetError(Exception):
    """Base exception for all streamchat errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        method: str | None = None,
        url: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.method = method
        self.url = url


class ConfigError(ChatWidgetError):
    """Required configuration (chat id, endpoint URL) is missing."""


class HttpError(ChatWidgetError):
    """Non-2xx response from the session endpoint."""

    @property
    def detail(self) -> str:
        return self.message


class SessionError(ChatWidgetError):
    """Session endpoint answered 2xx without a usable session token."""


class NotInitializedError(ChatWidgetError):
    """Streaming was requested before the session reached Ready."""


class StreamConnectError(ChatWidgetError):
    """Streaming endpoint returned non-2xx or no response body."""


class StreamBusyError(ChatWidgetError):
    """A second stream was started while one is still active."""


class MalformedFrameError(ChatWidgetError):
    """A frame payload failed to parse as a JSON object."""

    def __init__(self, message: str, payload: str = "", event_name: str = "message"):
        super().__init__(message)
        self.payload = payload
        self.event_name = event_name


class TransportError(ChatWidgetError):
    """I/O failure while connecting or reading the response body."""
