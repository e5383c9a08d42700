"""
Terminal plumbing for the streamchat CLI.

Log routing through rich, line input for the chat loop, and an entry-point
wrapper that turns Ctrl-C or SIGTERM mid-stream into a clean exit code
instead of a traceback.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
import contextlib
import logging
import signal
import sys
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

CANCELLED_EXIT = 130  # 128 + SIGINT
CANCELLED_MESSAGE = "✖ Chat cancelled"


def configure_logging(verbose: bool) -> None:
    """Route streamchat logs to stderr through rich; DEBUG when verbose."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=Console(stderr=True), show_path=verbose)
    logger = logging.getLogger("streamchat")
    logger.handlers[:] = [handler]
    logger.setLevel(level)
    logger.propagate = False


def prompt(label: str) -> str | None:
    """
    Read one line of user input.

    Returns:
        The stripped line, or None on EOF (Ctrl-D).
    """
    try:
        return input(label).strip()
    except EOFError:
        return None


def _announce_cancel() -> None:
    Console(stderr=True).print(f"\n{CANCELLED_MESSAGE}", style="yellow", highlight=False)


@contextlib.contextmanager
def _interrupt_handling() -> Iterator[None]:
    """Treat SIGTERM as Ctrl-C and keep interrupts that escape ``fn`` quiet."""

    def _on_term(_signum: int, _frame: Any) -> None:
        raise KeyboardInterrupt

    def _on_uncaught(exc_type: type, exc: BaseException, tb: Any) -> Any:
        if issubclass(exc_type, KeyboardInterrupt):
            _announce_cancel()
            sys.exit(CANCELLED_EXIT)
        return previous_hook(exc_type, exc, tb)

    previous_term = signal.signal(signal.SIGTERM, _on_term)
    previous_hook = sys.excepthook
    sys.excepthook = _on_uncaught
    try:
        yield
    finally:
        sys.excepthook = previous_hook
        signal.signal(signal.SIGTERM, previous_term)


def graceful_main(fn: Callable[[list[str]], int], argv: list[str]) -> int:
    """
    Run ``fn(argv)`` and return its exit code.

    An interrupt (Ctrl-C while typing or streaming, or SIGTERM) prints a
    short notice and returns :data:`CANCELLED_EXIT`.
    """
    with _interrupt_handling():
        try:
            return int(fn(argv) or 0)
        except KeyboardInterrupt:
            _announce_cancel()
            return CANCELLED_EXIT
