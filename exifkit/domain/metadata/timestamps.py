"""Module: timestamps.py

Author: Michael Economou
Date: 2026-10-18

Date/time helpers for exiftool values.

exiftool prints dates as "YYYY:MM:DD HH:MM:SS" with optional sub-seconds,
time zone and DST marker, and a few writers store ISO 8601 or dashed dates
instead. normalize_timestamp_string_format() detects the shape and returns a
strptime format together with the value rewritten to match it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import datetime, timezone

from exifkit.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

DEFAULT_TIMESTAMP_FORMAT = "%Y:%m:%d %H:%M:%S"

_TIMESTAMP_RE = re.compile(
    r"^(?P<year>\d{4})[:\-/](?P<month>\d{2})[:\-/](?P<day>\d{2})"
    r"(?:[ T](?P<time>\d{2}:\d{2}(?::\d{2})?)(?:[.,](?P<fraction>\d+))?)?"
    r"\s*(?P<zone>Z|[+\-]\d{2}:?\d{2})?"
    r"(?:\s*DST)?\s*$",
    re.IGNORECASE,
)


def normalize_timestamp_string_format(value: str) -> tuple[str, str]:
    """Detect the format of an exiftool timestamp string.

    Args:
        value: Raw date string, e.g. "2021:07:04 18:22:05.12+02:00"

    Returns:
        (date_format, normalized_value) suitable for datetime.strptime().
        Unrecognised shapes come back with DEFAULT_TIMESTAMP_FORMAT and the
        stripped value, so that parsing reports the mismatch.
    """
    stripped = value.strip()
    match = _TIMESTAMP_RE.match(stripped)
    if not match:
        return DEFAULT_TIMESTAMP_FORMAT, stripped

    date_format = "%Y:%m:%d"
    normalized = f"{match['year']}:{match['month']}:{match['day']}"

    time_part = match["time"]
    if time_part:
        if time_part.count(":") == 1:
            time_part += ":00"
        date_format += " %H:%M:%S"
        normalized += f" {time_part}"

        fraction = match["fraction"]
        if fraction:
            date_format += ".%f"
            normalized += "." + fraction[:6].ljust(6, "0")

    zone = match["zone"]
    if zone:
        if zone.upper() == "Z":
            zone = "+00:00"
        elif ":" not in zone:
            zone = f"{zone[:3]}:{zone[3:]}"
        date_format += "%z"
        normalized += zone

    return date_format, normalized


def parse_timestamp(value: str) -> datetime | None:
    """Parse an exiftool timestamp, returning None when it cannot be parsed."""
    if not value or not value.strip():
        return None

    date_format, normalized = normalize_timestamp_string_format(value)
    try:
        return datetime.strptime(normalized, date_format)
    except ValueError:
        logger.debug(
            "[Timestamps] Cannot parse '%s' as '%s'",
            normalized,
            date_format,
            extra={"dev_only": True},
        )
        return None


def _sort_key(date: datetime) -> datetime:
    # Naive exiftool dates carry no zone; compare them as UTC
    if date.tzinfo is None:
        return date.replace(tzinfo=timezone.utc)
    return date


def find_earliest_date(candidates: Iterable[datetime], fallback: datetime) -> datetime:
    """Return the earliest candidate, or fallback when there is none.

    On equal instants the first candidate is kept.
    """
    earliest: datetime | None = None
    for candidate in candidates:
        if earliest is None or _sort_key(candidate) < _sort_key(earliest):
            earliest = candidate

    return earliest if earliest is not None else fallback
