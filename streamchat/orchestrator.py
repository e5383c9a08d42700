"""Streaming request lifecycle: connect, pump the body, always end Idle."""

import logging

import requests

from ._exceptions import (
    ConfigError,
    NotInitializedError,
    StreamBusyError,
    StreamConnectError,
    TransportError,
)
from ._http import HTTPClient, _error_detail
from .assembler import MessageAssembler
from .config import WidgetConfig
from .framing import EventFramer, TransportReader
from .session import SessionState
from .streaming import EventDispatcher, StreamAccumulator, StreamResult, stream_end

logger = logging.getLogger(__name__)

STREAM_CLOSED_REASON = "Stream closed by server."


class StreamOrchestrator:
    """Owns the reader/framer/dispatcher pipeline for one exchange at a time."""

    def __init__(
        self,
        config: WidgetConfig,
        http: HTTPClient,
        session: SessionState,
        assembler: MessageAssembler,
        dispatcher: EventDispatcher | None = None,
    ):
        self._config = config
        self._http = http
        self._session = session
        self.assembler = assembler
        self.dispatcher = dispatcher or EventDispatcher(config.text.unknown_error)
        self.framer: EventFramer | None = None

    @property
    def is_streaming(self) -> bool:
        return self.assembler.state.is_streaming

    def stream_response(self, message_text: str) -> StreamResult:
        """
        Send ``message_text`` and stream the reply into the assembler.

        Transport failures once the request is underway are reported to the
        presenter and recorded in the result, not raised.

        Raises:
            NotInitializedError: the session is not Ready
            ConfigError: no streaming URL is configured
            StreamBusyError: a stream is already active on this instance
            StreamConnectError: non-2xx status or no response body
        """
        if not self._session.is_ready:
            raise NotInitializedError(self._config.text.not_initialized)
        url = self._config.backend_stream_url
        if not url:
            raise ConfigError(self._config.text.stream_not_configured)
        if self.is_streaming:
            raise StreamBusyError("A response is already streaming; wait for it to finish.")

        accumulator = StreamAccumulator()
        payload = {"session_token": self._session.token, "message": message_text}
        try:
            response = self._http.open_stream(url, payload)
        except TransportError as e:
            logger.error("Streaming request failed: %s", e.message)
            self._report_transport_failure(accumulator)
            return accumulator.result()

        try:
            self._check_response(response, url)
            self.assembler.begin()
            self.assembler.presenter.show_typing_indicator()
            self._pump(response, accumulator)
        finally:
            response.close()
        return accumulator.result()

    def _check_response(self, response: requests.Response, url: str) -> None:
        if not response.ok:
            detail = _error_detail(response, default=self._config.text.stream_connect_failed)
            raise StreamConnectError(
                detail, status_code=response.status_code, method="POST", url=url
            )
        if response.raw is None:
            raise StreamConnectError(
                self._config.text.stream_connect_failed,
                status_code=response.status_code,
                method="POST",
                url=url,
            )

    def _pump(self, response: requests.Response, accumulator: StreamAccumulator) -> None:
        self.framer = EventFramer()
        reader = TransportReader(response.iter_content(chunk_size=None))
        try:
            for text in reader:
                for frame in self.framer.push(text):
                    event = self.dispatcher.classify(frame)
                    if event is None:
                        continue
                    accumulator.process(event)
                    self.assembler.handle(event)
        except (requests.RequestException, OSError) as e:
            logger.error("Streaming read failed: %s", e, exc_info=True)
            self.framer.finish()
            self._report_transport_failure(accumulator)
            return
        except BaseException:
            self.assembler.state.reset()
            raise

        self.framer.finish()
        state = self.assembler.state
        if state.is_streaming or state.has_open_bubble:
            event = stream_end(STREAM_CLOSED_REASON)
            accumulator.process(event)
            self.assembler.handle(event)
        logger.debug("Stream finished after %d events", accumulator.count)

    def _report_transport_failure(self, accumulator: StreamAccumulator) -> None:
        message = self._config.text.connection_error
        accumulator.fail(message)
        self.assembler.presenter.append_system_message(message)
        self.assembler.finish()
