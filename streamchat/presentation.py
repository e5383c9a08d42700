"""
Presentation collaborator interface.

The streaming core never touches a UI directly; it drives an implementation
of :class:`Presenter`. See ``streamchat.cli.display`` for the terminal one.
"""

from abc import ABC, abstractmethod
from enum import Enum


class MessageRole(str, Enum):
    """Display roles for transcript entries."""

    BOT = "bot"
    USER = "user"
    SYSTEM = "system"


ASSISTANT_ROLE = "assistant"


def display_role(role: str) -> str:
    """Map a backend role to its display role ("assistant" shows as bot)."""
    if role == ASSISTANT_ROLE:
        return MessageRole.BOT.value
    return role


class Presenter(ABC):
    """UI operations consumed by the message assembler and the widget."""

    @abstractmethod
    def open_bot_bubble(self) -> None:
        """Start a new, empty bot message."""

    @abstractmethod
    def render_bot_bubble(self, markdown_text: str) -> None:
        """
        Re-render the open bot message.

        Args:
            markdown_text: The full accumulated text, never just the latest delta
        """

    @abstractmethod
    def append_transcript_message(self, role: str, content: str) -> None:
        """Append a complete message with the given display role."""

    @abstractmethod
    def append_system_message(self, text: str) -> None:
        """Append a system notice (status, errors)."""

    @abstractmethod
    def show_typing_indicator(self) -> None:
        pass

    @abstractmethod
    def hide_typing_indicator(self) -> None:
        pass

    def post_process_bubble(self) -> None:
        """Hook run after every bubble update (e.g. embedding video links)."""
        return None
