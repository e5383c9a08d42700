"""
ChatWidget: one chat instance wiring session bootstrap, streaming and a presenter.
"""

from collections.abc import Mapping
import logging
from typing import Any

from ._exceptions import ChatWidgetError, ConfigError
from ._http import HTTPClient
from .assembler import MessageAssembler
from .config import WidgetConfig
from .orchestrator import StreamOrchestrator
from .presentation import MessageRole, Presenter
from .session import SessionBootstrap, SessionState
from .streaming import StreamResult

logger = logging.getLogger(__name__)


class ChatWidget:
    """
    Chat widget bound to one backend chat.

    Usage:
        with ChatWidget(WidgetConfig.from_env(), ConsolePresenter()) as widget:
            result = widget.send_message("What are your opening hours?")
            print(result.text)

    Sends must be serialized by the caller; a send while a reply is still
    streaming is reported as an error rather than interleaved.
    """

    def __init__(
        self,
        config: WidgetConfig,
        presenter: Presenter,
        http: HTTPClient | None = None,
    ):
        self.config = config
        self.presenter = presenter
        self._http = http or HTTPClient(timeout=config.timeout, user_agent=config.user_agent)
        self.session = SessionBootstrap(config, self._http)
        self.assembler = MessageAssembler(presenter, config.text)
        self.orchestrator = StreamOrchestrator(
            config, self._http, self.session.state, self.assembler
        )

    @property
    def session_state(self) -> SessionState:
        return self.session.state

    @property
    def is_session_initialized(self) -> bool:
        return self.session.state.is_ready

    def init_session(self) -> bool:
        """
        Initialize the session, reporting progress as system messages.

        Returns:
            True if the session is Ready.
        """
        if self.is_session_initialized:
            return True

        text = self.config.text
        try:
            self.session.check_config()
        except ConfigError as e:
            logger.error("Cannot init session: %s", e.message)
            self.session.state.fail()
            self.presenter.append_system_message(text.config_error)
            return False

        self.presenter.append_system_message(text.initializing)
        try:
            self.session.init_session()
        except ChatWidgetError as e:
            self.presenter.append_system_message(text.session_failed.format(error=e.message))
            return False
        self.presenter.append_system_message(text.session_started)
        return True

    def send_message(self, text: str) -> StreamResult | None:
        """
        Send a user message and stream the reply.

        Returns:
            The stream summary, or None if nothing was streamed.
        """
        message = (text or "").strip()
        if not message:
            return None

        self.presenter.append_transcript_message(MessageRole.USER.value, message)

        if not self.is_session_initialized:
            self.presenter.append_system_message(self.config.text.initializing_before_send)
            if not self.init_session():
                self.presenter.append_system_message(self.config.text.init_failed_before_send)
                return None

        try:
            return self.orchestrator.stream_response(message)
        except ChatWidgetError as e:
            logger.warning("Send failed: %s", e.message)
            self.presenter.append_system_message(self._describe(e))
            return None

    def ask(self, question: Any) -> StreamResult | None:
        """Send a predefined question (plain text, a mapping, or any object)."""
        if isinstance(question, Mapping):
            question = question.get("value") or question.get("text") or ""
        return self.send_message(str(question) if question is not None else "")

    def _describe(self, error: ChatWidgetError) -> str:
        text = self.config.text
        if error.status_code is not None:
            return text.error_prefix.format(error=error.message)
        return error.message

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ChatWidget":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<ChatWidget chat_id={self.config.chat_id!r} status={self.session.state.status.value}>"
