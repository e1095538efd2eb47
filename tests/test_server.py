"""
Tests for the command-line entry point.
"""

import json
from pathlib import Path

import pytest

from chuk_mcp_rhythm.server import _parse_file


class TestParseCommand:
    """Tests for the parse subcommand."""

    def test_parses_the_given_file(
        self, temp_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """The exact path is parsed even when a sibling shares its stem."""
        (temp_dir / "foo.yaml").write_text(
            "- {kind: duration, identifier: RootNodeDuration, value: '1'}\n"
        )
        (temp_dir / "foo.yml").write_text(
            "- {kind: duration, identifier: RootNodeDuration, value: '2'}\n"
        )

        assert _parse_file(temp_dir / "foo.yml", strict=False, summary=True) == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["total_duration"] == "2"

    def test_full_score_output(
        self, library_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Without --summary the whole score is printed."""
        assert _parse_file(library_path / "two-halves.yaml", strict=False, summary=False) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["title"] == "Two Halves"
        assert data["performers"] == {"vn": {"vn": "Violin"}}

    def test_missing_file(self, temp_dir: Path) -> None:
        """A missing file exits non-zero."""
        assert _parse_file(temp_dir / "absent.yaml", strict=False, summary=True) == 1

    def test_strict_failure(self, temp_dir: Path) -> None:
        """Strict mode turns an invalid declaration into a failed exit."""
        (temp_dir / "bad.yaml").write_text(
            "- kind: container\n"
            "  identifier: PerformerDeclaration\n"
            "  opening_value: p1\n"
            "  tokens:\n"
            "    - {kind: string, identifier: InstrumentID, value: x}\n"
            "    - {kind: string, identifier: InstrumentType, value: Kazoo}\n"
        )
        assert _parse_file(temp_dir / "bad.yaml", strict=True, summary=True) == 1
