"""Module: record.py

Author: Michael Economou
Date: 2026-10-18

ExifToolMetadata: one file's metadata as returned by exiftool -json.

exiftool wraps the output for a single file in a one-element JSON array. The
element is kept as a plain dict of tag name -> JSON value; typed getters on
top of it never fail, absence yields "" or 0.

Derived values:
- get_time(): date fields, with a distinct ZeroDateError for placeholders
- get_earliest_creation_date(): best creation date across redundant fields
- media, software, camera and GPS helpers
"""

from __future__ import annotations

import json
import math
import re
from datetime import datetime
from typing import Any, Union

from exifkit.domain.metadata.gps import GPSData
from exifkit.domain.metadata.timestamps import (
    find_earliest_date,
    normalize_timestamp_string_format,
)
from exifkit.errors import (
    CreationDateNotFoundError,
    DateParseError,
    MetadataDateError,
    MetadataDecodeError,
    ZeroDateError,
)
from exifkit.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

# A decoded JSON value
FieldValue = Union[str, int, float, bool, list, dict, None]

CREATION_DATE_CANDIDATE_KEYS = (
    "CreateDate",
    "ModifyDate",
    "DateTimeOriginal",
    "DateTimeDigitized",
    "GPSDateTime",
    "FileModifyDate",
)

DURATION_CANDIDATE_KEYS = ("Duration", "MediaDuration", "TrackDuration")

# Dates at or before this year are placeholders (epoch), not real dates
PLACEHOLDER_YEAR_LIMIT = 1970

_NONZERO_DATE_RE = re.compile(r"^[1-9]")


class ExifToolMetadata:
    """Metadata record for a single file.

    Attributes:
        source_file: Path the record describes
        data_map: Tag name -> decoded JSON value
        data_map_json: Text last handed to parse(), kept for diagnostics
    """

    def __init__(self, source_file: str = "", data_map: dict[str, Any] | None = None) -> None:
        self.source_file = source_file
        self.data_map: dict[str, FieldValue] = dict(data_map) if data_map else {}
        self.data_map_json = ""

    def __repr__(self) -> str:
        return f"ExifToolMetadata(source_file={self.source_file!r}, fields={len(self.data_map)})"

    def __contains__(self, key: object) -> bool:
        return key in self.data_map

    def __len__(self) -> int:
        return len(self.data_map)

    def keys(self) -> list[str]:
        return list(self.data_map.keys())

    # =====================================
    # PARSING
    # =====================================

    def parse(self, json_bytes: bytes | str) -> None:
        """Load the record from exiftool's JSON output for one file.

        Args:
            json_bytes: JSON text of a one-element array holding an object

        Raises:
            MetadataDecodeError: Invalid JSON or not a one-element array of an object
        """
        if isinstance(json_bytes, (bytes, bytearray)):
            text = bytes(json_bytes).decode("utf-8", errors="replace")
        else:
            text = json_bytes
        self.data_map_json = text

        try:
            decoded = json.loads(text)
        except json.JSONDecodeError as e:
            raise MetadataDecodeError(
                f"error during unmarshaling ({text!r}): {e}", payload=text
            ) from e

        if not isinstance(decoded, list) or len(decoded) != 1 or not isinstance(decoded[0], dict):
            raise MetadataDecodeError(
                f"error during unmarshaling ({text!r}): expected a one-element array of an object",
                payload=text,
            )

        self.data_map = decoded[0]
        if not self.source_file:
            self.source_file = self.get("SourceFile")

    @classmethod
    def from_json(cls, json_bytes: bytes | str, source_file: str = "") -> ExifToolMetadata:
        meta = cls(source_file)
        meta.parse(json_bytes)
        return meta

    # =====================================
    # TYPED GETTERS
    # =====================================

    def get(self, key: str) -> str:
        """String form of a field, "" when absent."""
        return _to_string(self.data_map.get(key))

    def get_int(self, key: str) -> int:
        """Integer form of a field, 0 when absent or not numeric."""
        return _to_int(self.data_map.get(key))

    def get_time(self, key: str) -> datetime:
        """Parse a date field.

        Raises:
            ZeroDateError: Field is empty or a placeholder such as "0000:00:00 00:00:00"
            DateParseError: Field does not parse with its detected format
        """
        value = self.get(key)
        if not value or not _NONZERO_DATE_RE.match(value):
            raise ZeroDateError(key, value)

        date_format, normalized = normalize_timestamp_string_format(value)
        try:
            return datetime.strptime(normalized, date_format)
        except ValueError as e:
            raise DateParseError(normalized, date_format, str(e)) from e

    def get_earliest_creation_date(self) -> datetime:
        """Earliest genuine date among the creation date candidate fields.

        Fields that are empty, unparsable or dated at or before 1970 are
        skipped. On equal instants the field listed first in
        CREATION_DATE_CANDIDATE_KEYS wins.

        Raises:
            CreationDateNotFoundError: No candidate holds a genuine date
        """
        candidates = []
        for key in CREATION_DATE_CANDIDATE_KEYS:
            try:
                date = self.get_time(key)
            except ZeroDateError:
                continue
            except MetadataDateError as e:
                logger.debug(
                    "[ExifToolMetadata] Skipping %s for %s: %s",
                    key,
                    self.source_file,
                    e,
                    extra={"dev_only": True},
                )
                continue

            if date.year <= PLACEHOLDER_YEAR_LIMIT:
                logger.debug(
                    "[ExifToolMetadata] Skipping placeholder %s=%s for %s",
                    key,
                    date.isoformat(),
                    self.source_file,
                    extra={"dev_only": True},
                )
                continue

            candidates.append(date)

        # datetime.min fallback fails the year check below when nothing is left
        earliest = find_earliest_date(candidates, datetime.min)

        if earliest.year <= PLACEHOLDER_YEAR_LIMIT:
            logger.error(
                "[ExifToolMetadata] No usable creation date among %d candidates in %s",
                len(candidates),
                self.source_file,
            )
            raise CreationDateNotFoundError(self.source_file)

        return earliest

    # =====================================
    # MEDIA HELPERS
    # =====================================

    def get_mime_type(self) -> str:
        return self.get("MIMEType")

    def get_media_width(self) -> int:
        return self.get_int("ImageWidth")

    def get_media_height(self) -> int:
        return self.get_int("ImageHeight")

    def get_media_dpi(self) -> int:
        dpi = self.get_int("XResolution")
        if dpi != 0:
            return dpi
        return self.get_int("YResolution")

    def get_media_duration(self) -> str:
        """First non-empty duration field, without "(approx)" and spaces."""
        for key in DURATION_CANDIDATE_KEYS:
            value = self.get(key).replace("(approx)", "").replace(" ", "").strip()
            if value:
                return value
        return ""

    def get_full_creation_software(self) -> str:
        return _combine_names(self.get("CreatorTool"), self.get("Software"))

    def get_full_camera_name(self) -> str:
        return _combine_names(self.get("Make"), self.get("Model"))

    def get_gps_data(self) -> GPSData:
        return GPSData.from_strings(
            self.get("GPSPosition"), self.get("GPSAltitude"), self.get("GPSDateTime")
        )


def _combine_names(primary: str, secondary: str) -> str:
    """ "Canon" + "EOS 5D" -> "Canon (EOS 5D)"; duplicates collapse to one."""
    name = primary
    if secondary and secondary != name:
        name = f"{name} ({secondary})" if name else secondary
    return name.strip()


def _to_string(value: FieldValue) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _to_int(value: FieldValue) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return 0
        return int(number) if math.isfinite(number) else 0
    return 0
