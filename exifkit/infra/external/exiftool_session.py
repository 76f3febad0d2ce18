"""Module: exiftool_session.py

Author: Michael Economou
Date: 2026-10-18

ExifToolSession: a persistent exiftool process in '-stay_open True' mode.

exiftool reads newline separated arguments from stdin ('-@ -') and runs them
on every '-execute'. Its stdout and stderr share one pipe; each answer ends
with a "{ready}" line which ReadyTokenScanner uses to cut the stream into
records. One lock guards the full write-commands/read-one-record cycle, so
callers on several threads are served strictly one after the other.

Usage:
    with ExifToolSession() as session:
        meta = session.read_metadata("photo.jpg")
        print(meta.get_earliest_creation_date())

Requires: exiftool installed and in PATH (or an explicit executable path)
"""

from __future__ import annotations

import contextlib
import os
import subprocess
import threading
import time
from typing import Any

import psutil

from exifkit.config import (
    EXIFTOOL_CLOSE_TIMEOUT,
    EXIFTOOL_ORPHAN_GRACEFUL_WAIT,
    EXIFTOOL_ORPHAN_SCAN_TIMEOUT,
    ExifToolConfig,
)
from exifkit.domain.metadata.record import ExifToolMetadata
from exifkit.errors import (
    ExifToolCloseError,
    ExifToolReadError,
    ExifToolSessionError,
    ExifToolStartupError,
    InvalidPathError,
    MetadataDecodeError,
)
from exifkit.infra.external.ready_token_scanner import ReadyTokenScanner
from exifkit.utils.logging.logger_factory import get_cached_logger
from exifkit.utils.shared.external_tools import get_tool_version, is_tool_available

logger = get_cached_logger(__name__)


class ExifToolSession:
    """Persistent exiftool process with serialized request/response access.

    Sessions are independent: each owns its process, pipes and lock, and any
    number of them may run side by side.

    Attributes:
        config: Immutable command grammar and limits
        process: The running exiftool process, None when not open
        lock: Held for a whole request, and for close()
    """

    def __init__(self, config: ExifToolConfig | None = None) -> None:
        self.config = config if config is not None else ExifToolConfig.defaults()
        self.process: subprocess.Popen[bytes] | None = None
        self.lock = threading.Lock()

        self._stdin: Any = None
        self._merged_out: Any = None
        self._scanner: ReadyTokenScanner | None = None
        self._closed = False

        # Health tracking
        self._requests_served = 0
        self._last_error: str | None = None

    def __enter__(self) -> ExifToolSession:
        self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __del__(self) -> None:
        # Destructor must never block or raise: kill a process left running.
        with contextlib.suppress(Exception):
            proc = self.process
            if proc is not None and proc.poll() is None:
                proc.kill()

    @property
    def is_open(self) -> bool:
        return self.process is not None

    # =====================================
    # LIFECYCLE
    # =====================================

    def open(self) -> None:
        """Start exiftool in stay_open mode.

        stderr is merged into stdout: exiftool's warnings and errors are part
        of the scanned stream.

        Raises:
            ExifToolSessionError: The session is already open or was closed
            ExifToolStartupError: The process or its pipes cannot be created
        """
        with self.lock:
            if self.process is not None:
                raise ExifToolSessionError("exiftool session is already open")
            if self._closed:
                raise ExifToolSessionError("exiftool session was closed and cannot be reopened")

            cmd = [self.config.executable, *self.config.open_args]
            logger.debug("[ExifToolSession] Starting: %s", " ".join(cmd), extra={"dev_only": True})

            try:
                process = subprocess.Popen(
                    cmd,
                    stdin=subprocess.PIPE,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    bufsize=0,
                )
            except OSError as e:
                self._last_error = str(e)
                raise ExifToolStartupError(
                    f"error when executing command {self.config.executable!r}: {e}"
                ) from e

            if process.stdin is None or process.stdout is None:
                with contextlib.suppress(OSError):
                    process.kill()
                raise ExifToolStartupError("error when piping exiftool stdin/stdout")

            self.process = process
            self._stdin = process.stdin
            self._merged_out = process.stdout
            self._scanner = ReadyTokenScanner(
                self._merged_out,
                self.config.ready_token,
                max_buffer_size=self.config.buffer_max_size,
                chunk_size=self.config.read_chunk_size,
            )

            logger.info("[ExifToolSession] exiftool started (pid %d)", process.pid)

    def close(self) -> None:
        """Ask exiftool to leave stay_open mode and release both pipes.

        Failures are collected rather than raised one at a time, so a failing
        stdout close cannot hide a failing stdin close.

        Raises:
            ExifToolCloseError: One or more steps of the shutdown failed
        """
        with self.lock:
            proc = self.process
            if proc is None:
                logger.debug("[ExifToolSession] close() on a session that is not open")
                return

            errors: list[Exception] = []

            if proc.poll() is None:
                try:
                    self._write_lines(self.config.close_args)
                except (OSError, ValueError) as e:
                    errors.append(_wrap_close_error("error while writing close arguments", e))
            else:
                logger.debug(
                    "[ExifToolSession] exiftool already exited (code %s), skipping close arguments",
                    proc.returncode,
                )

            try:
                self._merged_out.close()
            except OSError as e:
                errors.append(_wrap_close_error("error while closing merged output", e))

            try:
                self._stdin.close()
            except OSError as e:
                errors.append(_wrap_close_error("error while closing stdin", e))

            try:
                proc.wait(timeout=EXIFTOOL_CLOSE_TIMEOUT)
            except subprocess.TimeoutExpired:
                logger.warning(
                    "[ExifToolSession] exiftool (pid %d) did not exit within %.1fs, killing it",
                    proc.pid,
                    EXIFTOOL_CLOSE_TIMEOUT,
                )
                with contextlib.suppress(OSError):
                    proc.kill()
                with contextlib.suppress(subprocess.TimeoutExpired):
                    proc.wait(timeout=EXIFTOOL_CLOSE_TIMEOUT)

            self.process = None
            self._stdin = None
            self._merged_out = None
            self._scanner = None
            self._closed = True

            if errors:
                self._last_error = "; ".join(str(e) for e in errors)
                logger.error("[ExifToolSession] %s", self._last_error)
                raise ExifToolCloseError(errors)

            logger.debug("[ExifToolSession] exiftool session closed", extra={"dev_only": True})

    # =====================================
    # REQUESTS
    # =====================================

    def read_metadata(self, file_path: str | os.PathLike[str]) -> ExifToolMetadata:
        """Read the metadata of one file.

        Blocks until exiftool has answered; there is no timeout.

        Raises:
            ExifToolSessionError: The session is not open
            InvalidPathError: The path contains a line break
            ExifToolReadError: No record came back, or the stream failed
            MetadataDecodeError: The record is not the expected JSON shape
        """
        path = os.fspath(file_path)
        if "\n" in path or "\r" in path:
            raise InvalidPathError(f"file path must not contain line breaks: {path!r}")

        with self.lock:
            if self.process is None or self._scanner is None:
                raise ExifToolSessionError("exiftool session is not open")

            meta = ExifToolMetadata(path)

            try:
                self._write_lines((*self.config.extract_args, path, self.config.execute_arg))
            except (OSError, ValueError) as e:
                self._last_error = str(e)
                raise ExifToolReadError(f"error while writing to exiftool for {path}: {e}") from e

            scanner = self._scanner
            if not scanner.scan():
                if scanner.error is not None:
                    self._last_error = str(scanner.error)
                    raise ExifToolReadError(
                        f"error while reading merged output: {scanner.error}"
                    ) from scanner.error
                self._last_error = f"error reading exif data: {path}"
                raise ExifToolReadError(self._last_error)

            try:
                meta.parse(scanner.record)
            except MetadataDecodeError as e:
                self._last_error = str(e)
                raise MetadataDecodeError(
                    f"error decoding exif data for {path}: {e}", payload=e.payload
                ) from e

            self._requests_served += 1
            logger.debug(
                "[ExifToolSession] Read %d fields for %s",
                len(meta),
                path,
                extra={"dev_only": True},
            )
            return meta

    def _write_lines(self, lines) -> None:
        """Write each argument as its own newline-terminated line, then flush."""
        for line in lines:
            data = os.fsencode(line) if isinstance(line, str) else bytes(line)
            self._stdin.write(data + b"\n")
        self._stdin.flush()

    # =====================================
    # HEALTH
    # =====================================

    def is_healthy(self) -> bool:
        """True while the exiftool process is running and its output stream is intact."""
        proc = self.process
        if proc is None or proc.poll() is not None:
            return False
        return self._stream_error() is None

    def _stream_error(self) -> Exception | None:
        scanner = self._scanner
        return scanner.error if scanner is not None else None

    def last_error(self) -> str | None:
        return self._last_error

    def health_check(self) -> dict[str, Any]:
        """Snapshot of the session's process state and counters."""
        proc = self.process
        if proc is None:
            process_status = "closed" if self._closed else "not started"
            alive = False
        else:
            returncode = proc.poll()
            alive = returncode is None
            process_status = "running" if alive else f"terminated (code: {returncode})"

        stream_error = self._stream_error()
        if alive and stream_error is not None:
            # Scanner errors are sticky: no later request can succeed
            process_status = f"running (output stream failed: {stream_error})"

        return {
            "healthy": alive and stream_error is None,
            "process_alive": alive,
            "process_status": process_status,
            "pid": proc.pid if proc is not None else None,
            "requests_served": self._requests_served,
            "last_error": self._last_error,
            "last_check": time.time(),
        }

    @staticmethod
    def is_available(executable: str = "exiftool") -> bool:
        """Check whether exiftool can be found and answers -ver."""
        if not is_tool_available(executable):
            logger.warning("[ExifToolSession] exiftool not found: %s", executable)
            return False
        return get_tool_version(executable) is not None

    @staticmethod
    def cleanup_orphaned_processes(
        exclude_pids: set[int] | None = None,
        *,
        max_scan_s: float = EXIFTOOL_ORPHAN_SCAN_TIMEOUT,
        graceful_wait_s: float = EXIFTOOL_ORPHAN_GRACEFUL_WAIT,
    ) -> int:
        """Terminate stray 'exiftool -stay_open' processes.

        Sessions that were never closed (crashed callers) leave exiftool
        waiting on stdin forever. The scan and the wait are both time-capped.

        Args:
            exclude_pids: Processes to leave alone, e.g. live sessions' pids
            max_scan_s: Maximum time to spend scanning processes
            graceful_wait_s: Maximum time to wait for terminate() before kill()

        Returns:
            Number of processes found and signalled
        """
        exclude_pids = exclude_pids or set()
        orphans = []
        scan_start = time.perf_counter()

        for proc in psutil.process_iter(["pid", "name", "cmdline"]):
            if (time.perf_counter() - scan_start) > max_scan_s:
                logger.debug(
                    "[ExifToolSession] Process scan time limit reached (%.2fs)",
                    max_scan_s,
                    extra={"dev_only": True},
                )
                break
            try:
                if proc.info["pid"] in exclude_pids:
                    continue
                cmdline = " ".join(proc.info["cmdline"] or []).lower()
                if "exiftool" in cmdline and "-stay_open" in cmdline:
                    orphans.append(proc)
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                continue

        if not orphans:
            logger.debug("[ExifToolSession] No orphaned exiftool processes found")
            return 0

        logger.warning("[ExifToolSession] Found %d orphaned exiftool processes", len(orphans))

        for proc in orphans:
            with contextlib.suppress(psutil.NoSuchProcess, psutil.AccessDenied):
                proc.terminate()

        _, alive = psutil.wait_procs(orphans, timeout=max(0.0, graceful_wait_s))
        if alive:
            logger.warning("[ExifToolSession] Force killing %d exiftool processes", len(alive))
            for proc in alive:
                with contextlib.suppress(psutil.NoSuchProcess, psutil.AccessDenied):
                    proc.kill()

        return len(orphans)


def _wrap_close_error(message: str, error: Exception) -> ExifToolSessionError:
    wrapped = ExifToolSessionError(f"{message}: {error}")
    wrapped.__cause__ = error
    return wrapped
