"""Unit tests for reading search values."""

from __future__ import annotations

from pathlib import Path

import pytest

from org_contributions.identities import parse_search_values, read_search_values


def test_blank_lines_are_discarded() -> None:
    assert parse_search_values("alice\n\nbob\n   \ncarol\n") == ["alice", "bob", "carol"]


def test_windows_line_endings_and_padding() -> None:
    assert parse_search_values("  alice@co.com\r\nbob@co.com \r\n") == [
        "alice@co.com",
        "bob@co.com",
    ]


def test_order_and_duplicates_are_kept() -> None:
    assert parse_search_values("bob\nalice\nbob") == ["bob", "alice", "bob"]


def test_read_search_values(tmp_path: Path) -> None:
    path = tmp_path / "search_values.txt"
    path.write_text("alice\nbob\n", encoding="utf-8")

    assert read_search_values(path) == ["alice", "bob"]


def test_read_search_values_missing_file(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        read_search_values(tmp_path / "nope.txt")
