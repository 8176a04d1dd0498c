"""Exceptions raised by the API clients."""

from __future__ import annotations


class ContributionsError(Exception):
    """Base class for failures talking to an upstream API."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubError(ContributionsError):
    """A GitHub REST call failed."""


class HumaansError(ContributionsError):
    """A Humaans REST call failed."""
