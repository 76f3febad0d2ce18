"""Module: external_tools.py

Author: Michael Economou
Date: 2026-10-18

External tool detection and path resolution.

Locates the exiftool executable either from an explicit path or from the
system PATH, and queries its version.

Usage:
    from exifkit.utils.shared.external_tools import get_tool_path, ToolName

    # Get exiftool path (raises FileNotFoundError if not found)
    exiftool = get_tool_path(ToolName.EXIFTOOL)

    # Check if tool is available
    if is_tool_available("exiftool"):
        ...
"""

import os
import platform
import shutil
import subprocess
from enum import Enum

from exifkit.config import EXIFTOOL_VERSION_TIMEOUT
from exifkit.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class ToolName(str, Enum):
    """Supported external tools."""

    EXIFTOOL = "exiftool"


def _tool_value(tool: "ToolName | str") -> str:
    return tool.value if isinstance(tool, ToolName) else str(tool)


def get_system_tool_path(tool: "ToolName | str") -> str | None:
    """Find tool in system PATH.

    Args:
        tool: Tool name or executable name

    Returns:
        Path string to the tool or None if not found
    """
    name = _tool_value(tool)
    system_path = shutil.which(name)
    if system_path:
        logger.debug("[ExternalTools] Found system %s at: %s", name, system_path)
    else:
        logger.debug("[ExternalTools] %s not found in system PATH", name)
    return system_path


def get_tool_path(tool: "ToolName | str") -> str:
    """Get the path to an external tool.

    Strategy:
    1. An explicit path (anything with a directory part) is used as-is if it exists
    2. Otherwise the system PATH is searched
    3. FileNotFoundError is raised if not found

    Raises:
        FileNotFoundError: If tool not found anywhere
    """
    name = _tool_value(tool)

    if os.path.dirname(name):
        if os.path.isfile(name):
            return name
        raise FileNotFoundError(f"{name} not found.")

    system_path = get_system_tool_path(name)
    if system_path:
        return system_path

    raise FileNotFoundError(
        f"{name} not found in PATH on {platform.system()}. "
        f"Please install it. Download from: {_get_download_url(name)}"
    )


def is_tool_available(tool: "ToolName | str") -> bool:
    """Check if a tool is available without raising exceptions."""
    try:
        get_tool_path(tool)
        return True
    except FileNotFoundError:
        return False


def _get_download_url(name: str) -> str:
    urls = {
        ToolName.EXIFTOOL.value: "https://exiftool.org/",
    }
    return urls.get(os.path.basename(name), "")


def get_tool_version(tool: "ToolName | str") -> str | None:
    """Get version of an external tool.

    Returns:
        Version string or None if tool not available
    """
    name = _tool_value(tool)
    try:
        tool_path = get_tool_path(name)

        result = subprocess.run(
            [tool_path, "-ver"],
            capture_output=True,
            text=True,
            timeout=EXIFTOOL_VERSION_TIMEOUT,
            check=False,
        )

        if result.returncode == 0:
            version_line = result.stdout.strip().split("\n")[0]
            logger.debug("[ExternalTools] %s version: %s", name, version_line)
            return version_line

        logger.warning("[ExternalTools] %s -ver returned code %d", name, result.returncode)

    except (FileNotFoundError, PermissionError, subprocess.TimeoutExpired) as e:
        logger.debug("[ExternalTools] Could not get %s version: %s", name, e)

    return None
