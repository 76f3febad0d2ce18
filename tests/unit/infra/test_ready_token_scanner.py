"""
Tests for the ready token framing.

Author: Michael Economou
Date: 2026-10-18

Covers split_ready_token() directly and ReadyTokenScanner over streams that
deliver their bytes in arbitrary chunks.
"""

from __future__ import annotations

import io

import pytest

from exifkit.errors import FramingError, ScannerBufferFullError
from exifkit.infra.external.ready_token_scanner import ReadyTokenScanner, split_ready_token

TOKEN = b"{ready}\n"
CRLF_TOKEN = b"{ready}\r\n"


class ChunkStream:
    """Binary stream that hands out pre-cut chunks, one per read()."""

    def __init__(self, chunks: list[bytes]) -> None:
        self._chunks = list(chunks)
        self.reads = 0

    def read(self, size: int = -1) -> bytes:
        self.reads += 1
        if not self._chunks:
            return b""
        chunk = self._chunks.pop(0)
        if size is not None and 0 <= size < len(chunk):
            self._chunks.insert(0, chunk[size:])
            chunk = chunk[:size]
        return chunk


class FailingStream:
    def read(self, size: int = -1) -> bytes:
        raise OSError("pipe broke")


class TestSplitReadyToken:
    """Tests for the pure split function."""

    def test_token_found_returns_record_and_advance(self) -> None:
        data = b'[{"a": 1}]' + TOKEN
        advance, record = split_ready_token(data, False, TOKEN)

        assert record == b'[{"a": 1}]'
        assert advance == len(data)

    def test_token_is_not_part_of_record(self) -> None:
        advance, record = split_ready_token(b"abc" + TOKEN + b"next", False, TOKEN)

        assert record == b"abc"
        assert advance == 3 + len(TOKEN)

    def test_zero_length_record(self) -> None:
        advance, record = split_ready_token(TOKEN + TOKEN, False, TOKEN)

        assert record == b""
        assert advance == len(TOKEN)

    def test_partial_token_requests_more_data(self) -> None:
        assert split_ready_token(b"abc{rea", False, TOKEN) == (0, None)

    def test_empty_buffer_at_eof_is_not_an_error(self) -> None:
        assert split_ready_token(b"", True, TOKEN) == (0, None)

    def test_leftover_bytes_at_eof_raise(self) -> None:
        with pytest.raises(FramingError, match="no final token found"):
            split_ready_token(b"abc{rea", True, TOKEN)

    def test_leftover_bytes_before_eof_do_not_raise(self) -> None:
        assert split_ready_token(b"abc", False, TOKEN) == (0, None)

    def test_crlf_token_does_not_match_lf_output(self) -> None:
        assert split_ready_token(b"abc{ready}\n", False, CRLF_TOKEN) == (0, None)
        assert split_ready_token(b"abc{ready}\r\n", False, CRLF_TOKEN) == (len(b"abc") + 9, b"abc")

    def test_start_offset_skips_known_prefix(self) -> None:
        data = b"0123456789" + TOKEN
        assert split_ready_token(data, False, TOKEN, start=8) == (len(data), b"0123456789")


class TestReadyTokenScanner:
    """Tests for incremental scanning over chunked streams."""

    def test_single_record(self) -> None:
        scanner = ReadyTokenScanner(io.BytesIO(b"[{}]" + TOKEN), TOKEN)

        assert scanner.scan() is True
        assert scanner.record == b"[{}]"
        assert scanner.buffered == 0
        assert scanner.error is None

    def test_token_split_across_reads(self) -> None:
        stream = ChunkStream([b'[{"a": 1}]{rea', b"dy}\n"])
        scanner = ReadyTokenScanner(stream, TOKEN)

        assert scanner.scan() is True
        assert scanner.record == b'[{"a": 1}]'
        assert stream.reads == 2

    def test_token_split_byte_by_byte(self) -> None:
        payload = b'[{"SourceFile": "a.jpg"}]'
        stream = ChunkStream([bytes([b]) for b in payload + TOKEN])
        scanner = ReadyTokenScanner(stream, TOKEN)

        assert scanner.scan() is True
        assert scanner.record == payload

    def test_large_record_over_many_reads(self) -> None:
        payload = b"x" * 100_000
        scanner = ReadyTokenScanner(io.BytesIO(payload + TOKEN), TOKEN, chunk_size=7)

        assert scanner.scan() is True
        assert scanner.record == payload

    def test_several_records_in_one_read(self) -> None:
        scanner = ReadyTokenScanner(io.BytesIO(b"one" + TOKEN + b"two" + TOKEN), TOKEN)

        assert scanner.scan() is True
        assert scanner.record == b"one"
        assert scanner.scan() is True
        assert scanner.record == b"two"
        assert scanner.scan() is False
        assert scanner.error is None

    def test_back_to_back_tokens_yield_empty_records(self) -> None:
        scanner = ReadyTokenScanner(io.BytesIO(TOKEN + TOKEN), TOKEN)

        assert scanner.scan() is True
        assert scanner.record == b""
        assert scanner.scan() is True
        assert scanner.record == b""

    def test_missing_final_token_fails_only_at_eof(self) -> None:
        stream = ChunkStream([b"first" + TOKEN, b"trailing bytes"])
        scanner = ReadyTokenScanner(stream, TOKEN)

        assert scanner.scan() is True
        assert scanner.record == b"first"

        assert scanner.scan() is False
        assert isinstance(scanner.error, FramingError)
        assert "no final token found" in str(scanner.error)

    def test_clean_eof_returns_false_without_error(self) -> None:
        scanner = ReadyTokenScanner(io.BytesIO(b""), TOKEN)

        assert scanner.scan() is False
        assert scanner.error is None
        assert scanner.record == b""

    def test_errors_are_sticky(self) -> None:
        scanner = ReadyTokenScanner(io.BytesIO(b"partial"), TOKEN)

        assert scanner.scan() is False
        first_error = scanner.error
        assert scanner.scan() is False
        assert scanner.error is first_error

    def test_buffer_limit_without_token(self) -> None:
        scanner = ReadyTokenScanner(io.BytesIO(b"x" * 100 + TOKEN), TOKEN, max_buffer_size=32)

        assert scanner.scan() is False
        assert isinstance(scanner.error, ScannerBufferFullError)
        assert isinstance(scanner.error, FramingError)

    def test_record_within_buffer_limit(self) -> None:
        data = b"x" * 20 + TOKEN
        scanner = ReadyTokenScanner(ChunkStream([data]), TOKEN, max_buffer_size=len(data))

        assert scanner.scan() is True
        assert scanner.record == b"x" * 20

    def test_read_errors_are_stored(self) -> None:
        scanner = ReadyTokenScanner(FailingStream(), TOKEN)

        assert scanner.scan() is False
        assert isinstance(scanner.error, OSError)

    def test_crlf_token(self) -> None:
        scanner = ReadyTokenScanner(io.BytesIO(b"[{}]\r\n" + CRLF_TOKEN), CRLF_TOKEN)

        assert scanner.scan() is True
        assert scanner.record == b"[{}]\r\n"

    def test_rejects_empty_token(self) -> None:
        with pytest.raises(ValueError):
            ReadyTokenScanner(io.BytesIO(b""), b"")

    def test_rejects_buffer_smaller_than_token(self) -> None:
        with pytest.raises(ValueError):
            ReadyTokenScanner(io.BytesIO(b""), TOKEN, max_buffer_size=3)
