"""
streamchat - Python client for streaming chat backends

Session bootstrap plus an incremental event-stream engine that turns a
chunked HTTP body into rendered assistant messages.
"""

__version__ = "0.1.0"

from ._exceptions import (
    ChatWidgetError,
    ConfigError,
    HttpError,
    MalformedFrameError,
    NotInitializedError,
    SessionError,
    StreamBusyError,
    StreamConnectError,
    TransportError,
)
from .assembler import AssemblyState, MessageAssembler
from .config import WidgetConfig, WidgetText
from .framing import EventFramer, StreamFrame, TransportReader
from .orchestrator import StreamOrchestrator
from .presentation import MessageRole, Presenter
from .session import SessionBootstrap, SessionState, SessionStatus
from .streaming import EventDispatcher, SemanticEvent, SemanticEventType, StreamResult
from .widget import ChatWidget

__all__ = [
    "AssemblyState",
    # Main entry point
    "ChatWidget",
    "ChatWidgetError",
    "ConfigError",
    "EventDispatcher",
    "EventFramer",
    "HttpError",
    "MalformedFrameError",
    "MessageAssembler",
    "MessageRole",
    "NotInitializedError",
    "Presenter",
    "SemanticEvent",
    "SemanticEventType",
    "SessionBootstrap",
    "SessionError",
    "SessionState",
    "SessionStatus",
    "StreamBusyError",
    "StreamConnectError",
    "StreamFrame",
    "StreamOrchestrator",
    "StreamResult",
    "TransportError",
    "TransportReader",
    "WidgetConfig",
    "WidgetText",
]
