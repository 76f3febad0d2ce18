"""Module: exifkit.config

Author: Michael Economou
Date: 2026-10-18

Configuration package for exifkit.

- app: Package info, logging
- features: ExifTool command grammar, scanner limits, timeouts

All settings are re-exported from this module:
    from exifkit.config import EXIFTOOL_EXTRACT_ARGS, LOG_CONSOLE_LEVEL
"""

from exifkit.config.app import *  # noqa: F401, F403
from exifkit.config.features import *  # noqa: F401, F403
