#!/usr/bin/env python3
"""
Module: exifkit.__main__

Print a short metadata summary for media files:
    python -m exifkit [--verbose] [--exiftool PATH] FILE...

One exiftool session is shared by all files.
"""

import argparse
import logging
import sys

from exifkit.config import APP_NAME, APP_VERSION, ExifToolConfig
from exifkit.domain.metadata.record import ExifToolMetadata
from exifkit.errors import ExifKitError, ExifKitFatalError
from exifkit.infra.external.exiftool_session import ExifToolSession
from exifkit.utils.logging.logger_factory import get_cached_logger
from exifkit.utils.logging.logger_setup import ConfigureLogger

logger = get_cached_logger(__name__)


def format_summary(meta: ExifToolMetadata) -> list[str]:
    """Human-readable summary lines for one record."""
    lines = [meta.source_file]

    def add(label: str, value) -> None:
        if value:
            lines.append(f"  {label:<10} {value}")

    add("MIME", meta.get_mime_type())
    width, height = meta.get_media_width(), meta.get_media_height()
    if width and height:
        add("Size", f"{width}x{height}")
    add("DPI", meta.get_media_dpi())
    add("Duration", meta.get_media_duration())
    add("Camera", meta.get_full_camera_name())
    add("Software", meta.get_full_creation_software())

    gps = meta.get_gps_data()
    if not gps.is_empty():
        add("GPS", f"{gps.latitude:.6f}, {gps.longitude:.6f}")

    try:
        add("Created", meta.get_earliest_creation_date().isoformat(sep=" "))
    except ExifKitFatalError as e:
        add("Created", f"unknown ({e})")

    return lines


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 if any file failed).
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME, description="Read media metadata through a persistent exiftool process"
    )
    parser.add_argument("files", nargs="+", help="Media files to read")
    parser.add_argument("--exiftool", default=None, help="Path to the exiftool executable")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    args = parser.parse_args(argv)

    ConfigureLogger(console_level=logging.DEBUG if args.verbose else logging.WARNING)

    config = ExifToolConfig.defaults()
    if args.exiftool:
        config = config.with_overrides(executable=args.exiftool)

    failed = 0
    try:
        with ExifToolSession(config) as session:
            for path in args.files:
                try:
                    meta = session.read_metadata(path)
                except ExifKitError as e:
                    logger.error("[exifkit] %s", e)
                    failed += 1
                    continue
                print("\n".join(format_summary(meta)))
    except ExifKitError as e:
        logger.error("[exifkit] %s", e)
        return 1

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
