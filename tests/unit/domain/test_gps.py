"""
Tests for GPS decoding.

Author: Michael Economou
Date: 2026-10-18
"""

from datetime import datetime, timezone

import pytest

from exifkit.domain.metadata.gps import GPSData, parse_altitude, parse_coordinate


class TestParseCoordinate:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("48 deg 51' 29.40\" N", 48.858167),
            ("33 deg 52' 4.20\" S", -33.867833),
            ("2 deg 17' 40.20\" E", 2.2945),
            ("118 deg 14' 37.26\" W", -118.243683),
            ("48 deg 30' N", 48.5),
            ("48.858167", 48.858167),
            ("-33.867833", -33.867833),
            ("33.867833 S", -33.867833),
        ],
    )
    def test_decodes(self, text, expected) -> None:
        assert parse_coordinate(text) == pytest.approx(expected, abs=1e-6)

    @pytest.mark.parametrize("text", ["", "north", "12 deg 5' X"])
    def test_undecodable(self, text) -> None:
        assert parse_coordinate(text) is None


class TestParseAltitude:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("35.2 m Above Sea Level", 35.2),
            ("12 m Below Sea Level", -12.0),
            ("35.2 m", 35.2),
            ("35.2", 35.2),
        ],
    )
    def test_decodes(self, text, expected) -> None:
        assert parse_altitude(text) == pytest.approx(expected)

    def test_undecodable(self) -> None:
        assert parse_altitude("unknown") is None


class TestGPSData:
    def test_from_strings(self) -> None:
        gps = GPSData.from_strings(
            "40 deg 41' 21.30\" N, 74 deg 2' 40.20\" W",
            "10 m Above Sea Level",
            "2022:09:10 11:12:13Z",
        )

        assert gps.latitude == pytest.approx(40.689250, abs=1e-6)
        assert gps.longitude == pytest.approx(-74.044500, abs=1e-6)
        assert gps.altitude == pytest.approx(10.0)
        assert gps.timestamp == datetime(2022, 9, 10, 11, 12, 13, tzinfo=timezone.utc)
        assert not gps.is_empty()

    def test_numeric_output(self) -> None:
        gps = GPSData.from_strings("40.68925 -74.0445", "10", "")

        assert gps.latitude == pytest.approx(40.68925)
        assert gps.longitude == pytest.approx(-74.0445)
        assert gps.timestamp is None

    def test_empty_strings(self) -> None:
        gps = GPSData.from_strings("", "", "")

        assert gps == GPSData()
        assert gps.is_empty()

    def test_half_decodable_position_is_dropped(self) -> None:
        gps = GPSData.from_strings("48 deg 51' 29.40\" N, somewhere", "", "")

        assert gps.latitude is None
        assert gps.longitude is None
