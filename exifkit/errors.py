"""Module: errors.py

Author: Michael Economou
Date: 2026-10-18

Exception hierarchy for exifkit.

Recoverable errors derive from ExifKitError. ExifKitFatalError is a separate
branch: it marks conditions the caller cannot meaningfully continue from for
the file at hand (no usable creation date), and leaves the decision to stop
to the caller.
"""

from __future__ import annotations


class ExifKitError(Exception):
    """Base class for recoverable exifkit errors."""


# =====================================
# SESSION ERRORS
# =====================================


class ExifToolSessionError(ExifKitError):
    """Raised when a session is used in the wrong state."""


class ExifToolStartupError(ExifToolSessionError):
    """Raised when the exiftool process or its pipes cannot be created."""


class ExifToolReadError(ExifToolSessionError):
    """Raised when a request gets no record back from exiftool."""


class InvalidPathError(ExifToolSessionError, ValueError):
    """Raised for a file path that cannot travel over the line-based argument channel."""


class ExifToolCloseError(ExifToolSessionError):
    """Raised when shutting a session down failed.

    Every failure met during close is kept in ``errors`` so that one does
    not hide another.
    """

    def __init__(self, errors: list[Exception]) -> None:
        self.errors = list(errors)
        details = "; ".join(str(e) for e in self.errors)
        super().__init__(f"error while closing exiftool: [{details}]")


# =====================================
# FRAMING ERRORS
# =====================================


class FramingError(ExifKitError):
    """Raised when the output stream ends without a final ready token."""


class ScannerBufferFullError(FramingError):
    """Raised when a record outgrows the scanner's maximum buffer size."""


# =====================================
# METADATA ERRORS
# =====================================


class MetadataDecodeError(ExifKitError, ValueError):
    """Raised when an exiftool record is not a one-element JSON array."""

    def __init__(self, message: str, payload: str = "") -> None:
        super().__init__(message)
        self.payload = payload


class MetadataDateError(ExifKitError, ValueError):
    """Base class for date field errors."""


class ZeroDateError(MetadataDateError):
    """Field is empty or holds a placeholder date such as 0000:00:00."""

    def __init__(self, key: str = "", value: str = "") -> None:
        super().__init__("zero-date string")
        self.key = key
        self.value = value


class DateParseError(MetadataDateError):
    """Field holds a date string that does not match its detected format."""

    def __init__(self, value: str, date_format: str, reason: str = "") -> None:
        message = f"parsing time error formatting '{value}' as '{date_format}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.value = value
        self.date_format = date_format


# =====================================
# FATAL ERRORS
# =====================================


class ExifKitFatalError(Exception):
    """Base class for unrecoverable conditions. Not an ExifKitError."""


class CreationDateNotFoundError(ExifKitFatalError):
    """No candidate field yields a genuine creation date."""

    def __init__(self, source_file: str = "") -> None:
        message = "cannot find a suitable exif creation date"
        if source_file:
            message = f"{message}: {source_file}"
        super().__init__(message)
        self.source_file = source_file
