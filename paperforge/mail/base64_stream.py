"""Streaming base64 transcoding with fixed-width MIME lines.

An encoder thread base64-encodes the payload in blocks and writes the
encoded bytes into a bounded pipe. The calling thread reads the pipe in
76-byte chunks and writes each chunk followed by CRLF. The pipe holds at
most a few blocks, so the fully wrapped encoding never exists in memory
next to the raw payload.
"""

from __future__ import annotations

import base64
import logging
import queue
import threading
from typing import BinaryIO

from paperforge.errors import PaperforgeError

logger = logging.getLogger(__name__)

LINE_LENGTH = 76
CRLF = b"\r\n"

# Raw block size must stay a multiple of 3 so no block but the last is padded.
_RAW_BLOCK = 57 * 64
_PIPE_DEPTH = 8
_EOF = object()


class TranscodingError(PaperforgeError):
    """Raised when the encoder thread fails."""


class BoundedPipe:
    """Blocking byte handoff between one writer thread and one reader.

    ``write`` blocks while the pipe is full; ``read`` blocks until it can
    return *size* bytes or the writer has closed the pipe.
    """

    def __init__(self, depth: int = _PIPE_DEPTH) -> None:
        self._queue: queue.Queue[bytes | object] = queue.Queue(maxsize=depth)
        self._pending = bytearray()
        self._eof = False

    def write(self, data: bytes) -> None:
        if data:
            self._queue.put(data)

    def close(self) -> None:
        self._queue.put(_EOF)

    def read(self, size: int) -> bytes:
        """Return exactly *size* bytes, or fewer only at end of stream."""
        while len(self._pending) < size and not self._eof:
            item = self._queue.get()
            if item is _EOF:
                self._eof = True
            else:
                self._pending += item
        chunk = bytes(self._pending[:size])
        del self._pending[:size]
        return chunk

    def drain(self) -> None:
        """Discard everything until the writer closes the pipe."""
        while not self._eof:
            if self._queue.get() is _EOF:
                self._eof = True
        self._pending.clear()


def _encode_into(payload: bytes, pipe: BoundedPipe, errors: list[Exception]) -> None:
    view = memoryview(payload)
    try:
        for offset in range(0, len(view), _RAW_BLOCK):
            pipe.write(base64.b64encode(view[offset:offset + _RAW_BLOCK]))
    except Exception as exc:  # noqa: BLE001 (re-raised by the reader)
        errors.append(exc)
    finally:
        pipe.close()


def write_base64_lines(payload: bytes, out: BinaryIO, line_length: int = LINE_LENGTH) -> int:
    """Write *payload* to *out* as CRLF-terminated base64 lines.

    Every line but the last holds exactly *line_length* characters. A blank
    CRLF line follows the last one. Returns the number of encoded lines.
    """
    pipe = BoundedPipe()
    errors: list[Exception] = []
    encoder = threading.Thread(
        target=_encode_into, args=(payload, pipe, errors), name="base64-encoder", daemon=True
    )
    encoder.start()

    lines = 0
    try:
        while True:
            chunk = pipe.read(line_length)
            if not chunk:
                break
            out.write(chunk)
            out.write(CRLF)
            lines += 1
    except BaseException:
        pipe.drain()
        raise
    finally:
        encoder.join()

    if errors:
        raise TranscodingError(f"base64 encoder failed: {errors[0]}") from errors[0]

    out.write(CRLF)
    logger.debug("encoded %d bytes into %d lines", len(payload), lines)
    return lines
