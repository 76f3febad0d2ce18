"""Module: exifkit.config.features

Author: Michael Economou
Date: 2026-10-18

ExifTool command grammar, scanner limits and timeouts.

The values here are the defaults used by ExifToolConfig.defaults(). Sessions
never read them at request time; they are copied into the (frozen) session
configuration once.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

# =====================================
# EXIFTOOL COMMAND GRAMMAR
# =====================================

EXIFTOOL_EXECUTABLE = "exiftool"

# Persistent mode: read newline separated arguments from stdin
EXIFTOOL_OPEN_ARGS = ("-stay_open", "True", "-@", "-", "-common_args")

EXIFTOOL_CLOSE_ARGS = ("-stay_open", "False", "-execute")

EXIFTOOL_EXECUTE_ARG = "-execute"

# Tags that can hold very big strings
EXIFTOOL_EXCLUDED_TAGS = (
    "HistoryChanged",
    "HistoryWhen",
    "HistorySoftwareAgent",
    "HistoryInstanceID",
    "HistoryAction",
    "ThumbnailImage",
)

EXIFTOOL_EXTRACT_ARGS = (
    "-json",
    "-api",
    "largefilesupport=1",
    "-extractEmbedded",
    *(arg for tag in EXIFTOOL_EXCLUDED_TAGS for arg in ("-x", tag)),
)

# exiftool terminates the {ready} line with the platform line ending
EXIFTOOL_READY_TOKEN_TEXT = "{ready}"
EXIFTOOL_READY_TOKEN = (EXIFTOOL_READY_TOKEN_TEXT + os.linesep).encode("ascii")

# =====================================
# SCANNER LIMITS
# =====================================

EXIFTOOL_SCANNER_CHUNK_SIZE = 64 * 1024
EXIFTOOL_SCANNER_MAX_BUFFER = 64 * 1024 * 1024  # 64MB, embedded video tracks get big

# =====================================
# EXIFTOOL TIMEOUT SETTINGS
# =====================================

EXIFTOOL_CLOSE_TIMEOUT = 2.0
EXIFTOOL_VERSION_TIMEOUT = 5
EXIFTOOL_ORPHAN_SCAN_TIMEOUT = 0.5
EXIFTOOL_ORPHAN_GRACEFUL_WAIT = 0.5

# =====================================
# SESSION CONFIGURATION
# =====================================


@dataclass(frozen=True)
class ExifToolConfig:
    """Command grammar and limits of one ExifToolSession.

    Immutable once built; ExifToolConfig.defaults() resolves the standard
    grammar, including the platform's ready token, a single time.
    """

    executable: str = EXIFTOOL_EXECUTABLE
    open_args: tuple[str, ...] = EXIFTOOL_OPEN_ARGS
    ready_token: bytes = EXIFTOOL_READY_TOKEN
    close_args: tuple[str, ...] = EXIFTOOL_CLOSE_ARGS
    extract_args: tuple[str, ...] = EXIFTOOL_EXTRACT_ARGS
    execute_arg: str = EXIFTOOL_EXECUTE_ARG
    buffer_max_size: int | None = EXIFTOOL_SCANNER_MAX_BUFFER
    read_chunk_size: int = EXIFTOOL_SCANNER_CHUNK_SIZE

    def __post_init__(self) -> None:
        for name in ("open_args", "close_args", "extract_args"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        if isinstance(self.ready_token, str):
            object.__setattr__(self, "ready_token", self.ready_token.encode("utf-8"))

        if not self.executable:
            raise ValueError("executable must not be empty")
        if not self.ready_token:
            raise ValueError("ready_token must not be empty")
        if self.read_chunk_size <= 0:
            raise ValueError("read_chunk_size must be positive")

    @classmethod
    def defaults(cls, **overrides) -> "ExifToolConfig":
        """Standard stay_open grammar, with any field overridden by keyword."""
        return cls(**overrides)

    def with_overrides(self, **changes) -> "ExifToolConfig":
        return replace(self, **changes)
