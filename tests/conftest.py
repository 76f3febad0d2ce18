"""
Module: conftest.py

Author: Michael Economou
Date: 2026-10-18

Global pytest configuration and fixtures for the exifkit test suite.
Session tests run against tests/fixtures/fake_exiftool.py, a small stand-in
that speaks exiftool's stay_open protocol, so no real exiftool is needed.
"""

import contextlib
import json
import os
import sys
from pathlib import Path

# Add project root to sys.path so 'exifkit' imports without installation
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest

from exifkit.config import ExifToolConfig
from exifkit.errors import ExifToolCloseError
from exifkit.infra.external.exiftool_session import ExifToolSession
from exifkit.utils.shared.external_tools import is_tool_available

FAKE_EXIFTOOL = Path(__file__).parent / "fixtures" / "fake_exiftool.py"


def pytest_configure(config):
    """Register custom markers if not already added via pyproject.toml."""
    config.addinivalue_line("markers", "exiftool: test requires a real exiftool installation")


def pytest_collection_modifyitems(session, config, items):
    """Skip tests needing the real exiftool when it is not installed."""
    _ = session
    _ = config

    if is_tool_available("exiftool"):
        return

    skip_exiftool = pytest.mark.skip(reason="exiftool not installed")
    for item in items:
        if item.get_closest_marker("exiftool") is not None:
            item.add_marker(skip_exiftool)


@pytest.fixture
def fake_config():
    """Session configuration that runs the fake exiftool with this interpreter."""
    return ExifToolConfig.defaults(
        executable=sys.executable,
        open_args=(str(FAKE_EXIFTOOL), *ExifToolConfig().open_args),
    )


@pytest.fixture
def fake_session(fake_config):
    """Open session on the fake exiftool, closed after the test."""
    session = ExifToolSession(fake_config)
    session.open()
    yield session
    if session.is_open:
        # The fake may already be gone (quit/truncate cases)
        with contextlib.suppress(ExifToolCloseError):
            session.close()


@pytest.fixture
def sample_fields():
    """Fields as exiftool -json reports them for a camera JPEG."""
    return {
        "SourceFile": "/photos/IMG_0001.JPG",
        "MIMEType": "image/jpeg",
        "ImageWidth": 6000,
        "ImageHeight": 4000,
        "XResolution": 72,
        "YResolution": 72,
        "Make": "Canon",
        "Model": "Canon EOS 5D Mark IV",
        "Software": "Firmware Version 1.2.0",
        "CreateDate": "2019:05:12 14:33:21",
        "ModifyDate": "2019:05:13 09:00:00",
        "DateTimeOriginal": "2019:05:12 14:33:21",
        "FileModifyDate": "2020:01:02 03:04:05+01:00",
        "GPSPosition": "48 deg 51' 29.40\" N, 2 deg 17' 40.20\" E",
        "GPSAltitude": "35.2 m Above Sea Level",
        "GPSDateTime": "2019:05:12 12:33:20Z",
    }


@pytest.fixture
def sample_json(sample_fields):
    """sample_fields wrapped the way exiftool wraps a single file."""
    return json.dumps([sample_fields]).encode("utf-8")
