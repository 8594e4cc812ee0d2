"""Line-buffered JSON decoding of the rtl_433 output stream.

The decoder is fed raw bytes as they arrive, splits them on newlines and
classifies every complete line. Only the current partial line is kept
between calls, so memory stays bounded on an endless stream.
"""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator

from rtl_sensor_bridge.core.config import DEFAULT_CHUNK_SIZE, MAX_LINE_BYTES
from rtl_sensor_bridge.decoders.rtl433.models import (
    DecodedRecord,
    IncomingRecord,
    MalformedLine,
    NonJsonLine,
    OversizedLine,
    StreamEvent,
)

logger = logging.getLogger(__name__)


class StreamDecoder:
    """Incremental newline-delimited JSON decoder.

    Example:
        >>> decoder = StreamDecoder()
        >>> decoder.feed(b'{"id":1,"tempe')
        []
        >>> decoder.feed(b'rature_C":10}\\n')
        [DecodedRecord(...)]

    Attributes:
        max_line_bytes: Longest partial line kept before it is dropped.
    """

    def __init__(self, max_line_bytes: int = MAX_LINE_BYTES) -> None:
        self.max_line_bytes = max_line_bytes
        self._buffer = bytearray()
        self._discarding = False

    @property
    def pending(self) -> int:
        """Number of buffered bytes belonging to an incomplete line."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> list[StreamEvent]:
        """Consume a chunk of output.

        Args:
            chunk: Raw bytes, possibly ending mid-line.

        Returns:
            Events for every line completed by this chunk, in order.
        """
        events: list[StreamEvent] = []
        self._buffer.extend(chunk)

        while True:
            newline = self._buffer.find(b"\n")
            if newline < 0:
                break

            line = bytes(self._buffer[:newline])
            del self._buffer[: newline + 1]

            if self._discarding:
                # Tail of an oversized line
                self._discarding = False
                continue

            event = self._classify(line)
            if event is not None:
                events.append(event)

        if len(self._buffer) > self.max_line_bytes:
            if not self._discarding:
                logger.debug("Dropping oversized line (%d bytes buffered)", len(self._buffer))
                events.append(OversizedLine(size=len(self._buffer)))
                self._discarding = True
            self._buffer.clear()

        return events

    def flush(self) -> list[StreamEvent]:
        """Classify a trailing line that never got its newline.

        Call once the stream has ended.

        Returns:
            Zero or one event.
        """
        line = bytes(self._buffer)
        self._buffer.clear()

        if self._discarding:
            self._discarding = False
            return []

        event = self._classify(line)
        return [event] if event is not None else []

    def _classify(self, raw: bytes) -> StreamEvent | None:
        text = raw.decode("utf-8", errors="replace").strip()
        if not text:
            return None

        if not text.startswith("{"):
            return NonJsonLine(line=text)

        try:
            data = json.loads(text)
        except (ValueError, RecursionError) as e:
            return MalformedLine(line=text, error=str(e) or type(e).__name__)

        if not isinstance(data, dict):
            return MalformedLine(line=text, error="expected a JSON object")

        return DecodedRecord(record=IncomingRecord.from_json(data), line=text)


def iter_events(
    stream: io.BufferedIOBase,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    decoder: StreamDecoder | None = None,
) -> Iterator[StreamEvent]:
    """Lazily decode a binary stream until EOF.

    Reads whatever is available (``read1``) so events are produced as soon
    as a line completes rather than when a full chunk has arrived.

    Args:
        stream: Binary stream, e.g. a subprocess stdout pipe.
        chunk_size: Maximum bytes per read.
        decoder: Decoder to use; a fresh one by default.

    Yields:
        Stream events in arrival order.
    """
    decoder = decoder or StreamDecoder()

    while True:
        chunk = stream.read1(chunk_size)
        if not chunk:
            break
        yield from decoder.feed(chunk)

    yield from decoder.flush()
