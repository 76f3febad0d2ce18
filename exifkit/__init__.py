"""exifkit: persistent exiftool sessions and derived media metadata.

Usage:
    from exifkit import ExifToolSession

    with ExifToolSession() as session:
        meta = session.read_metadata("IMG_0001.JPG")
        meta.get_full_camera_name()
        meta.get_earliest_creation_date()
"""

from exifkit.config import APP_VERSION, ExifToolConfig
from exifkit.domain.metadata import CREATION_DATE_CANDIDATE_KEYS, ExifToolMetadata, GPSData
from exifkit.errors import (
    CreationDateNotFoundError,
    DateParseError,
    ExifKitError,
    ExifKitFatalError,
    ExifToolCloseError,
    ExifToolReadError,
    ExifToolSessionError,
    ExifToolStartupError,
    FramingError,
    InvalidPathError,
    MetadataDecodeError,
    ScannerBufferFullError,
    ZeroDateError,
)
from exifkit.infra.external import ExifToolSession, ReadyTokenScanner, split_ready_token

__version__ = APP_VERSION

__all__ = [
    "CREATION_DATE_CANDIDATE_KEYS",
    "CreationDateNotFoundError",
    "DateParseError",
    "ExifKitError",
    "ExifKitFatalError",
    "ExifToolCloseError",
    "ExifToolConfig",
    "ExifToolMetadata",
    "ExifToolReadError",
    "ExifToolSession",
    "ExifToolSessionError",
    "ExifToolStartupError",
    "FramingError",
    "GPSData",
    "InvalidPathError",
    "MetadataDecodeError",
    "ReadyTokenScanner",
    "ScannerBufferFullError",
    "ZeroDateError",
    "split_ready_token",
    "__version__",
]
