"""Reading the list of search values."""

from __future__ import annotations

from pathlib import Path

DEFAULT_SEARCH_VALUES_FILE = Path("search_values.txt")


def parse_search_values(text: str) -> list[str]:
    """Split newline-separated search values, dropping blank lines."""

    return [line.strip() for line in text.splitlines() if line.strip()]


def read_search_values(path: Path) -> list[str]:
    """Read usernames or emails from ``path``, one per line.

    Raises:
        OSError: if the file cannot be read.
        UnicodeDecodeError: if the file is not valid UTF-8.
    """

    return parse_search_values(path.read_text(encoding="utf-8"))
