"""Unit tests for the extract_mrz script."""

import json
import sys
from unittest.mock import patch

from scripts import extract_mrz


def run_cli(*args):
    with patch.object(sys, "argv", ["extract_mrz.py", *map(str, args)]):
        return extract_mrz.main()


class TestExtractMRZCli:
    """Test the command-line frame runner."""

    def test_first_valid_frame_printed(self, tmp_path, capsys, non_mrz_text, td3_text):
        """Test frames are processed in order until one validates."""
        first = tmp_path / "frame_001.txt"
        second = tmp_path / "frame_002.txt"
        first.write_text(non_mrz_text)
        second.write_text(td3_text)

        assert run_cli(first, second) == 0

        output = json.loads(capsys.readouterr().out)
        assert output == {
            "frame": 1,
            "source": str(second),
            "document_format": "TD3",
            "document_number": "L898902C3",
            "date_of_birth": "740812",
            "date_of_expiry": "120415",
        }

    def test_no_valid_frame(self, tmp_path, capsys, non_mrz_text):
        """Test exit code 1 when no frame yields an MRZ."""
        frame = tmp_path / "frame.txt"
        frame.write_text(non_mrz_text)

        assert run_cli(frame) == 1
        assert capsys.readouterr().out == ""

    def test_unreadable_frame(self, tmp_path):
        """Test exit code 2 for a missing frame file."""
        assert run_cli(tmp_path / "missing.txt") == 2

    def test_stdin_frame(self, capsys, td1_text):
        """Test '-' reads a frame from stdin."""
        with patch.object(sys, "stdin") as stdin:
            stdin.read.return_value = td1_text
            assert run_cli("-") == 0

        assert json.loads(capsys.readouterr().out)["document_format"] == "TD1"
