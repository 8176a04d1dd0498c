"""Test configuration and fixtures."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import pytest
import requests

from org_contributions.github.client import Repository

_SETTINGS_ENV = (
    "GITHUB_TOKEN",
    "HUMAANS_API_KEY",
    "GITHUB_BASE_URL",
    "HUMAANS_BASE_URL",
    "LOG_LEVEL",
    "HTTP_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment and `.env` out of every test."""
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """`configure_logging` swaps root handlers; put the originals back."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def make_response(payload: Any, status_code: int = 200) -> Mock:
    resp = Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Client Error", response=resp
        )
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def response() -> Callable[..., Mock]:
    """Build a fake `requests.Response` returning ``payload`` from `.json()`."""
    return make_response


@pytest.fixture
def session() -> Mock:
    """A `requests.Session` stand-in; set `.get.side_effect` per test."""
    fake = Mock(spec=requests.Session)
    fake.headers = {}
    return fake


@pytest.fixture
def repositories() -> list[Repository]:
    return [
        Repository(full_name="octo-org/api", size=120, owner="octo-org"),
        Repository(full_name="octo-org/web", size=64, owner="octo-org"),
        Repository(full_name="octo-org/docs", size=8, owner="octo-org"),
    ]
