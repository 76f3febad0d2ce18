"""External process integrations: the persistent exiftool session."""

from exifkit.infra.external.exiftool_session import ExifToolSession
from exifkit.infra.external.ready_token_scanner import ReadyTokenScanner, split_ready_token

__all__ = [
    "ExifToolSession",
    "ReadyTokenScanner",
    "split_ready_token",
]
