"""Module: gps.py

Author: Michael Economou
Date: 2026-10-18

GPS data decoded from exiftool's composite GPS tags.

Without -n, exiftool prints the composite tags in human-readable form:

    GPSPosition  48 deg 51' 29.40" N, 2 deg 17' 40.20" E
    GPSAltitude  35.2 m Above Sea Level
    GPSDateTime  2021:07:04 16:22:05.12Z

Numeric output (-n) is accepted as well. Anything that cannot be decoded is
left as None; decoding never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from exifkit.domain.metadata.timestamps import parse_timestamp

_NUMBER = r"[+\-]?\d+(?:\.\d+)?"

_DMS_RE = re.compile(
    rf"^(?P<deg>{_NUMBER})\s*(?:deg|°)"
    rf"(?:\s*(?P<min>{_NUMBER})\s*')?"
    rf"(?:\s*(?P<sec>{_NUMBER})\s*\")?"
    r"\s*(?P<ref>[NSEW])?$",
    re.IGNORECASE,
)
_DECIMAL_RE = re.compile(rf"^(?P<value>{_NUMBER})\s*(?P<ref>[NSEW])?$", re.IGNORECASE)
_ALTITUDE_RE = re.compile(rf"^(?P<value>{_NUMBER})\s*(?:m\b)?\s*(?P<ref>.*)$", re.IGNORECASE)


def _apply_ref(value: float, ref: str | None) -> float:
    if ref and ref.upper() in ("S", "W"):
        return -abs(value)
    return value


def parse_coordinate(text: str) -> float | None:
    """Decode one coordinate, DMS with hemisphere letter or signed decimal."""
    text = text.strip()
    if not text:
        return None

    match = _DMS_RE.match(text)
    if match:
        degrees = abs(float(match["deg"]))
        minutes = float(match["min"] or 0)
        seconds = float(match["sec"] or 0)
        value = degrees + minutes / 60 + seconds / 3600
        if match["deg"].startswith("-"):
            value = -value
        return _apply_ref(value, match["ref"])

    match = _DECIMAL_RE.match(text)
    if match:
        return _apply_ref(float(match["value"]), match["ref"])

    return None


def parse_altitude(text: str) -> float | None:
    """Decode "35.2 m Above Sea Level", "12 m Below Sea Level" or "35.2"."""
    match = _ALTITUDE_RE.match(text.strip())
    if not match:
        return None

    value = float(match["value"])
    if "below" in match["ref"].lower():
        value = -abs(value)
    return value


@dataclass
class GPSData:
    """Decoded GPS position, altitude (meters) and fix timestamp."""

    latitude: float | None = None
    longitude: float | None = None
    altitude: float | None = None
    timestamp: datetime | None = None

    def parse(self, position: str, altitude: str, date_time: str) -> GPSData:
        """Fill the fields from the three composite tag strings."""
        self.latitude, self.longitude = self._parse_position(position or "")
        self.altitude = parse_altitude(altitude) if altitude else None
        self.timestamp = parse_timestamp(date_time) if date_time else None
        return self

    @classmethod
    def from_strings(cls, position: str, altitude: str, date_time: str) -> GPSData:
        return cls().parse(position, altitude, date_time)

    @staticmethod
    def _parse_position(position: str) -> tuple[float | None, float | None]:
        parts = [p for p in position.split(",") if p.strip()]
        if len(parts) != 2:
            # -n output may use a space instead of a comma
            parts = position.split()
            if len(parts) != 2:
                return None, None

        latitude = parse_coordinate(parts[0])
        longitude = parse_coordinate(parts[1])
        if latitude is None or longitude is None:
            return None, None
        return latitude, longitude

    def is_empty(self) -> bool:
        return self.latitude is None and self.longitude is None
