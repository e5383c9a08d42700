"""Incremental assembly of streamed text into bot message bubbles."""

from dataclasses import dataclass
from enum import Enum
import logging

from .config import WidgetText
from .presentation import Presenter
from .streaming import (
    CachedMessageEvent,
    RunCompletedEvent,
    RunFailedEvent,
    SemanticEvent,
    StreamEndEvent,
    TextDeltaEvent,
)

logger = logging.getLogger(__name__)


class AssemblerPhase(str, Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


@dataclass
class AssemblyState:
    """Per-widget streaming state. ``has_open_bubble`` False implies empty content."""

    is_streaming: bool = False
    active_content: str = ""
    has_open_bubble: bool = False

    def reset(self) -> None:
        self.is_streaming = False
        self.active_content = ""
        self.has_open_bubble = False


class MessageAssembler:
    """
    Drives the presenter from semantic events.

    Every text delta re-renders the bubble from the whole accumulated text,
    since partial markdown tokens are not valid on their own.
    """

    def __init__(self, presenter: Presenter, text: WidgetText | None = None):
        self.presenter = presenter
        self.text = text or WidgetText()
        self.state = AssemblyState()

    @property
    def phase(self) -> AssemblerPhase:
        if self.state.has_open_bubble:
            return AssemblerPhase.ACCUMULATING
        return AssemblerPhase.IDLE

    def begin(self) -> None:
        """Reset for a new stream and mark it active."""
        self.state.reset()
        self.state.is_streaming = True

    def handle(self, event: SemanticEvent) -> None:
        """Apply one semantic event."""
        if isinstance(event, TextDeltaEvent):
            self._append(event.content)

        elif isinstance(event, CachedMessageEvent):
            self.presenter.append_transcript_message(event.role, event.content)

        elif isinstance(event, RunFailedEvent):
            self.presenter.append_system_message(self.text.error_prefix.format(error=event.message))
            self.finish()

        elif isinstance(event, RunCompletedEvent | StreamEndEvent):
            self.finish()

    def _append(self, content: str) -> None:
        if not self.state.has_open_bubble:
            self.presenter.open_bot_bubble()
            self.state.has_open_bubble = True
        self.state.active_content += content
        self.presenter.render_bot_bubble(self.state.active_content)
        self.presenter.post_process_bubble()

    def finish(self) -> None:
        """Close any open bubble and return to Idle."""
        self.presenter.hide_typing_indicator()
        if self.state.has_open_bubble:
            logger.debug("Closing bubble (%d chars)", len(self.state.active_content))
        self.state.reset()
