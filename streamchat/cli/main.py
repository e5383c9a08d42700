"""
Main CLI entry point for streamchat.

Talks to a chat backend from the terminal: ``chat`` for an interactive
session, ``send`` for a single exchange.
"""

import argparse
import sys

from streamchat import __version__

from ..config import WidgetConfig
from ..widget import ChatWidget
from .display import ConsolePresenter
from .util import configure_logging, graceful_main, prompt

QUIT_COMMANDS = {"/quit", "/exit"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="streamchat",
        description="Streaming chat client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--chat-id", help="Chat identifier (or set STREAMCHAT_CHAT_ID)")
    parser.add_argument(
        "--session-url", help="Session endpoint URL (or set STREAMCHAT_SESSION_URL)"
    )
    parser.add_argument("--stream-url", help="Streaming endpoint URL (or set STREAMCHAT_STREAM_URL)")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: none)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logs")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("chat", help="Interactive chat (type /quit to leave)")
    send = subparsers.add_parser("send", help="Send one message and print the reply")
    send.add_argument("message", nargs="+", help="Message text")
    return parser


def run_chat(widget: ChatWidget) -> int:
    """Read-send loop until /quit or EOF."""
    widget.init_session()
    while True:
        line = prompt("> ")
        if line is None or line in QUIT_COMMANDS:
            return 0
        if line:
            widget.send_message(line)


def run_send(widget: ChatWidget, message: str) -> int:
    result = widget.send_message(message)
    if result is None or not result.ok:
        return 1
    return 0


def _real_main(argv: list[str]) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args.verbose)

    try:
        config = WidgetConfig.from_env(
            chat_id=args.chat_id,
            session_endpoint_url=args.session_url,
            backend_stream_url=args.stream_url,
            timeout=args.timeout,
        )
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    presenter = ConsolePresenter()
    try:
        with ChatWidget(config, presenter) as widget:
            if args.command == "chat":
                return run_chat(widget)
            return run_send(widget, " ".join(args.message))
    finally:
        presenter.close()


def main() -> None:
    """Main CLI entry point with graceful interrupt handling."""
    code = graceful_main(_real_main, sys.argv[1:])
    raise SystemExit(code)


if __name__ == "__main__":
    main()
