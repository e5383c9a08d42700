"""
Semantic events for the chat streaming protocol.

Frames produced by :class:`~streamchat.framing.EventFramer` are classified
into a closed set of events by :class:`EventDispatcher`:

==========================  ===================================
event name                  semantic event
==========================  ===================================
``thread.message.delta``    :class:`TextDeltaEvent`
``thread.run.completed``    :class:`RunCompletedEvent`
``thread.run.failed``       :class:`RunFailedEvent`
``error``                   :class:`RunFailedEvent`
``cached_message``          :class:`CachedMessageEvent`
``stream_end``              :class:`StreamEndEvent`
anything else               :class:`SemanticEvent` (``UNKNOWN``)
==========================  ===================================

Deltas other than a non-empty ``text_delta`` are dropped, as are payloads
that are empty or not a JSON object.
"""

from dataclasses import dataclass, field
from enum import Enum
import json
import logging
from typing import Any

from ._exceptions import MalformedFrameError
from .framing import StreamFrame
from .presentation import display_role

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class EventName(str, Enum):
    """Event names sent by the streaming endpoint."""

    MESSAGE_DELTA = "thread.message.delta"
    RUN_COMPLETED = "thread.run.completed"
    RUN_FAILED = "thread.run.failed"
    ERROR = "error"
    CACHED_MESSAGE = "cached_message"
    STREAM_END = "stream_end"


class SemanticEventType(str, Enum):
    """Closed set of events the assembler understands."""

    TEXT_DELTA = "text_delta"
    RUN_COMPLETED = "run_completed"
    RUN_FAILED = "run_failed"
    CACHED_MESSAGE = "cached_message"
    STREAM_END = "stream_end"
    UNKNOWN = "unknown"


@dataclass
class SemanticEvent:
    """Base class for all semantic events; also used as-is for unknown ones."""

    type: SemanticEventType
    raw: dict[str, Any] = field(default_factory=dict)
    event_name: str = ""


@dataclass
class TextDeltaEvent(SemanticEvent):
    """Incremental text fragment."""

    content: str = ""


@dataclass
class RunCompletedEvent(SemanticEvent):
    """Backend finished the run."""


@dataclass
class RunFailedEvent(SemanticEvent):
    """Backend reported a failure mid-stream."""

    message: str = UNKNOWN_ERROR_MESSAGE


@dataclass
class CachedMessageEvent(SemanticEvent):
    """A complete, previously stored transcript message."""

    role: str = ""
    content: str = ""


@dataclass
class StreamEndEvent(SemanticEvent):
    """The stream is over without a run completion."""

    reason: str = ""


def text_delta(
    content: str, raw: dict[str, Any] | None = None, event_name: str = ""
) -> TextDeltaEvent:
    return TextDeltaEvent(
        type=SemanticEventType.TEXT_DELTA, raw=raw or {}, event_name=event_name, content=content
    )


def run_completed(raw: dict[str, Any] | None = None, event_name: str = "") -> RunCompletedEvent:
    return RunCompletedEvent(
        type=SemanticEventType.RUN_COMPLETED, raw=raw or {}, event_name=event_name
    )


def run_failed(
    message: str, raw: dict[str, Any] | None = None, event_name: str = ""
) -> RunFailedEvent:
    return RunFailedEvent(
        type=SemanticEventType.RUN_FAILED, raw=raw or {}, event_name=event_name, message=message
    )


def cached_message(
    role: str, content: str, raw: dict[str, Any] | None = None, event_name: str = ""
) -> CachedMessageEvent:
    return CachedMessageEvent(
        type=SemanticEventType.CACHED_MESSAGE,
        raw=raw or {},
        event_name=event_name,
        role=role,
        content=content,
    )


def stream_end(
    reason: str, raw: dict[str, Any] | None = None, event_name: str = ""
) -> StreamEndEvent:
    return StreamEndEvent(
        type=SemanticEventType.STREAM_END, raw=raw or {}, event_name=event_name, reason=reason
    )


class EventDispatcher:
    """
    Classifies frames into semantic events.

    Args:
        unknown_error: Failure message used when an error frame carries
            neither ``error`` nor ``detail``
    """

    def __init__(self, unknown_error: str = UNKNOWN_ERROR_MESSAGE):
        self.unknown_error = unknown_error

    @staticmethod
    def parse_payload(frame: StreamFrame) -> dict[str, Any] | None:
        """
        Decode a frame's payload.

        Returns:
            The JSON object, or None when the payload is empty or malformed
            (malformed payloads are logged and dropped, never raised).
        """
        payload = frame.payload
        if not payload:
            return None
        try:
            data = json.loads(payload)
        except json.JSONDecodeError:
            error = MalformedFrameError(
                "Failed to parse frame JSON", payload=payload, event_name=frame.event_name
            )
            logger.warning("%s (%s): %s", error.message, error.event_name, payload[:200])
            return None
        if not isinstance(data, dict):
            logger.warning(
                "Frame payload is not a JSON object (%s): %s", frame.event_name, payload[:200]
            )
            return None
        return data

    def classify(self, frame: StreamFrame) -> SemanticEvent | None:
        """
        Classify one frame.

        Returns:
            The semantic event, or None when the frame is dropped.
        """
        data = self.parse_payload(frame)
        if data is None:
            return None

        name = frame.event_name

        if name == EventName.CACHED_MESSAGE:
            role = data.get("role")
            content = data.get("content")
            if not role or not content:
                return None
            return cached_message(display_role(str(role)), str(content), data, name)

        if name == EventName.MESSAGE_DELTA:
            content = data.get("content")
            if data.get("type") != "text_delta" or not isinstance(content, str) or not content:
                return None
            return text_delta(content, data, name)

        if name == EventName.RUN_COMPLETED:
            return run_completed(data, name)

        if name in (EventName.RUN_FAILED, EventName.ERROR):
            message = data.get("error") or data.get("detail") or self.unknown_error
            return run_failed(str(message), data, name)

        if name == EventName.STREAM_END:
            return stream_end(str(data.get("message") or name), data, name)

        return SemanticEvent(type=SemanticEventType.UNKNOWN, raw=data, event_name=name)


@dataclass
class StreamResult:
    """Summary of one streaming exchange."""

    text: str = ""
    completed: bool = False
    error: str | None = None
    events: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class StreamAccumulator:
    """Collects dispatched events into a :class:`StreamResult`."""

    def __init__(self) -> None:
        self.text_parts: list[str] = []
        self.errors: list[str] = []
        self.completed = False
        self.count = 0

    def process(self, event: SemanticEvent) -> None:
        self.count += 1
        if isinstance(event, TextDeltaEvent):
            self.text_parts.append(event.content)
        elif isinstance(event, RunCompletedEvent):
            self.completed = True
        elif isinstance(event, RunFailedEvent):
            self.errors.append(event.message)

    def fail(self, message: str) -> None:
        self.errors.append(message)

    def get_text(self) -> str:
        return "".join(self.text_parts)

    def result(self) -> StreamResult:
        return StreamResult(
            text=self.get_text(),
            completed=self.completed,
            error=self.errors[-1] if self.errors else None,
            events=self.count,
        )
