"""Module: ready_token_scanner.py

Author: Michael Economou
Date: 2026-10-18

Framing for exiftool's -stay_open output stream.

In stay_open mode exiftool answers every -execute with a block of output
followed by a "{ready}" line. The stream carries no length prefix, and a
single JSON record for a large video can span many pipe reads, so records
are recovered by scanning for the ready token:

    split_ready_token()   pure split function over a byte buffer
    ReadyTokenScanner     incremental scanner that feeds it from a stream

The scanner keeps its buffer between calls: bytes that arrive after a token
belong to the next record.
"""

from __future__ import annotations

from typing import BinaryIO

from exifkit.config import EXIFTOOL_SCANNER_CHUNK_SIZE
from exifkit.errors import FramingError, ScannerBufferFullError
from exifkit.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


def split_ready_token(
    data: bytes | bytearray, at_eof: bool, token: bytes, start: int = 0
) -> tuple[int, bytes | None]:
    """Split one record off the front of ``data``.

    Args:
        data: Buffered, not yet consumed bytes
        at_eof: True when the stream has no more bytes to deliver
        token: The ready token, line ending included
        start: Offset from which to search (bytes before it are known token-free)

    Returns:
        (advance, record): number of bytes consumed and the record without
        its token, or (0, None) when more data is needed.

    Raises:
        FramingError: The stream ended with leftover bytes and no token.
    """
    idx = data.find(token, start)
    if idx == -1:
        if at_eof and len(data) > 0:
            raise FramingError("no final token found")
        return 0, None

    return idx + len(token), bytes(data[:idx])


class ReadyTokenScanner:
    """Incremental, token-delimited scanner over a binary stream.

    Each successful scan() exposes one record in ``record``. Errors are
    sticky: once ``error`` is set, scan() keeps returning False.

    Attributes:
        record: The last record split off the stream
        error: The first error met while scanning, if any
    """

    def __init__(
        self,
        stream: BinaryIO,
        token: bytes,
        max_buffer_size: int | None = None,
        chunk_size: int = EXIFTOOL_SCANNER_CHUNK_SIZE,
    ) -> None:
        if not token:
            raise ValueError("ready token must not be empty")
        if max_buffer_size is not None and max_buffer_size < len(token):
            raise ValueError("max_buffer_size is smaller than the ready token")

        self._stream = stream
        self._token = token
        self._max_buffer_size = max_buffer_size
        self._chunk_size = chunk_size
        self._buffer = bytearray()
        self._searched = 0  # bytes of _buffer already known to hold no token
        self._eof = False

        self.record: bytes = b""
        self.error: Exception | None = None

    @property
    def buffered(self) -> int:
        """Number of bytes read from the stream but not yet consumed."""
        return len(self._buffer)

    def scan(self) -> bool:
        """Advance to the next record.

        Blocks until a full record and its token have arrived, or until the
        stream ends.

        Returns:
            True if ``record`` holds a new record, False at end of stream or
            on error (check ``error``).
        """
        self.record = b""
        if self.error is not None:
            return False

        while True:
            try:
                advance, record = split_ready_token(
                    self._buffer, self._eof, self._token, self._searched
                )
            except FramingError as e:
                logger.debug(
                    "[ReadyTokenScanner] Stream ended with %d unframed bytes",
                    len(self._buffer),
                    extra={"dev_only": True},
                )
                self.error = e
                return False

            if record is not None:
                del self._buffer[:advance]
                self._searched = 0
                self.record = record
                return True

            if self._eof:
                return False

            # A token may straddle the end of the buffer: rescan its tail
            self._searched = max(0, len(self._buffer) - len(self._token) + 1)

            if not self._fill():
                return False

    def _fill(self) -> bool:
        """Read one chunk into the buffer. Returns False when an error was set."""
        size = self._chunk_size
        if self._max_buffer_size is not None:
            room = self._max_buffer_size - len(self._buffer)
            if room <= 0:
                self.error = ScannerBufferFullError(
                    f"token not found within {self._max_buffer_size} bytes"
                )
                return False
            size = min(size, room)

        try:
            read = getattr(self._stream, "read1", None) or self._stream.read
            chunk = read(size)
        except (OSError, ValueError) as e:
            self.error = e
            return False

        if not chunk:
            self._eof = True
        else:
            self._buffer.extend(chunk)
        return True
