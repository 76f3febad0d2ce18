"""Metadata domain: exiftool records, timestamps and GPS decoding."""

from exifkit.domain.metadata.gps import GPSData
from exifkit.domain.metadata.record import CREATION_DATE_CANDIDATE_KEYS, ExifToolMetadata

__all__ = [
    "CREATION_DATE_CANDIDATE_KEYS",
    "ExifToolMetadata",
    "GPSData",
]
