"""
Incremental decoding and framing of the event stream body.

The body is a sequence of blocks::

    event: thread.message.delta
    data: {"type": "text_delta", "content": "Hel"}

terminated by a blank line. Chunks from the transport can split a block,
a line, the blank-line separator or a multi-byte UTF-8 sequence anywhere;
:class:`TransportReader` and :class:`EventFramer` between them make that
invisible to the dispatcher.
"""

from collections.abc import Iterable, Iterator
import codecs
from dataclasses import dataclass, field
import logging

logger = logging.getLogger(__name__)

FRAME_SEPARATOR = "\n\n"
DEFAULT_EVENT_NAME = "message"


@dataclass
class StreamFrame:
    """One ``event:``/``data:`` block."""

    event_name: str = DEFAULT_EVENT_NAME
    data_lines: list[str] = field(default_factory=list)

    @property
    def payload(self) -> str:
        """Data lines joined with no separator."""
        return "".join(self.data_lines)


class TransportReader:
    """Decodes a byte-chunk iterator to text, one chunk at a time."""

    def __init__(self, chunks: Iterable[bytes], encoding: str = "utf-8"):
        self._chunks: Iterator[bytes] = iter(chunks)
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._done = False

    @property
    def done(self) -> bool:
        return self._done

    def read(self) -> str | None:
        """
        Return the next decoded text chunk, or None once the stream is exhausted.

        May return an empty string when a chunk holds only the start of a
        multi-byte character.
        """
        if self._done:
            return None
        chunk = next(self._chunks, None)
        if chunk is None:
            self._done = True
            tail = self._decoder.decode(b"", final=True)
            return tail or None
        if isinstance(chunk, str):
            return chunk
        return self._decoder.decode(chunk)

    def __iter__(self) -> Iterator[str]:
        while True:
            text = self.read()
            if text is None:
                return
            if text:
                yield text


def parse_frame(segment: str) -> StreamFrame:
    """Parse the lines of one block (separator already removed)."""
    frame = StreamFrame()
    for line in segment.split("\n"):
        if line.startswith("event:"):
            frame.event_name = line[len("event:") :].strip()
        elif line.startswith("data:"):
            frame.data_lines.append(line[len("data:") :].strip())
    return frame


class EventFramer:
    """Buffers decoded text and cuts it into complete frames."""

    def __init__(self) -> None:
        self.buffer = ""

    def push(self, text: str) -> list[StreamFrame]:
        """Append ``text`` and return every frame it completes, in order."""
        self.buffer += text
        frames: list[StreamFrame] = []
        boundary = self.buffer.find(FRAME_SEPARATOR)
        while boundary != -1:
            segment = self.buffer[:boundary]
            self.buffer = self.buffer[boundary + len(FRAME_SEPARATOR) :]
            frames.append(parse_frame(segment))
            boundary = self.buffer.find(FRAME_SEPARATOR)
        return frames

    def finish(self) -> str:
        """Discard whatever is left at end of stream and return it."""
        leftover = self.buffer
        self.buffer = ""
        if leftover.strip():
            logger.warning("Stream ended with unprocessed buffer: %r", leftover[:200])
        return leftover
