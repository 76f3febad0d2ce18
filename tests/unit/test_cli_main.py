"""
Tests for the command line entry point.

Author: Michael Economou
Date: 2026-10-18
"""

from unittest.mock import MagicMock, patch

import pytest

from exifkit.__main__ import format_summary, main
from exifkit.domain.metadata.record import ExifToolMetadata
from exifkit.errors import ExifToolReadError, ExifToolStartupError
from exifkit.infra.external.exiftool_session import ExifToolSession


@pytest.fixture
def session_cls():
    """Patch the session class used by main() and the logging setup."""
    with (
        patch("exifkit.__main__.ExifToolSession") as mock_cls,
        patch("exifkit.__main__.ConfigureLogger"),
    ):
        session = MagicMock()
        mock_cls.return_value.__enter__.return_value = session
        yield mock_cls, session


class TestFormatSummary:
    def test_camera_jpeg(self, sample_fields) -> None:
        meta = ExifToolMetadata(sample_fields["SourceFile"], sample_fields)

        lines = format_summary(meta)

        assert lines[0] == "/photos/IMG_0001.JPG"
        text = "\n".join(lines)
        assert "image/jpeg" in text
        assert "6000x4000" in text
        assert "Canon (Canon EOS 5D Mark IV)" in text
        assert "48.858167, 2.294500" in text
        assert "Created" in text
        assert "unknown" not in text

    def test_missing_creation_date(self) -> None:
        meta = ExifToolMetadata("/photos/blank.png", {"MIMEType": "image/png"})

        lines = format_summary(meta)

        assert lines[1].split() == ["MIME", "image/png"]
        assert "unknown" in lines[-1]


class TestMain:
    def test_prints_summary(self, session_cls, capsys) -> None:
        mock_cls, session = session_cls
        session.read_metadata.return_value = ExifToolMetadata(
            "a.jpg", {"MIMEType": "image/jpeg", "CreateDate": "2010:05:06 07:08:09"}
        )

        assert main(["a.jpg"]) == 0

        out = capsys.readouterr().out
        assert out.startswith("a.jpg")
        assert "2010-05-06 07:08:09" in out
        session.read_metadata.assert_called_once_with("a.jpg")
        assert mock_cls.call_args.args[0].executable == "exiftool"

    def test_exiftool_override(self, session_cls) -> None:
        mock_cls, session = session_cls
        session.read_metadata.return_value = ExifToolMetadata("a.jpg", {})

        main(["--exiftool", "/opt/exiftool/exiftool", "a.jpg"])

        assert mock_cls.call_args.args[0].executable == "/opt/exiftool/exiftool"

    def test_failed_file_sets_exit_code(self, session_cls, capsys) -> None:
        _, session = session_cls
        session.read_metadata.side_effect = [
            ExifToolReadError("error reading exif data: missing.jpg"),
            ExifToolMetadata("b.jpg", {}),
        ]

        assert main(["missing.jpg", "b.jpg"]) == 1
        assert "b.jpg" in capsys.readouterr().out

    def test_startup_failure(self, session_cls) -> None:
        mock_cls, _ = session_cls
        mock_cls.return_value.__enter__.side_effect = ExifToolStartupError("no exiftool")

        assert main(["a.jpg"]) == 1

    def test_requires_files(self, session_cls) -> None:
        with pytest.raises(SystemExit):
            main([])

    def test_line_break_in_path_fails_only_that_file(self, fake_config, capsys) -> None:
        with (
            patch("exifkit.__main__.ExifToolSession", lambda config: ExifToolSession(fake_config)),
            patch("exifkit.__main__.ConfigureLogger"),
        ):
            code = main(["ok.jpg", "bad\nname.jpg", "ok2.jpg"])

        out = capsys.readouterr().out
        assert code == 1
        assert "ok.jpg" in out
        assert "ok2.jpg" in out
        assert "bad" not in out
