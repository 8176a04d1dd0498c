"""Humaans people directory client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import urlencode

import requests

from org_contributions.errors import HumaansError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EmployeeRecord:
    """The subset of a Humaans person we care about."""

    email: str
    github: str | None = None
    id: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> EmployeeRecord:
        def _str(key: str) -> str | None:
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
            return None

        return cls(
            email=_str("email") or "",
            github=_str("github"),
            id=_str("id"),
            first_name=_str("firstName"),
            last_name=_str("lastName"),
        )


class HumaansClient:
    """Read-only access to the Humaans ``/people`` endpoint."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://app.humaans.io/api",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Humaans API key is required")

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            }
        )

    def _people_url(self, query: str | None = None) -> str:
        url = f"{self._base_url}/people"
        if query:
            url = f"{url}?{query.lstrip('?')}"
        return url

    def _get_people(self, query: str | None) -> list[EmployeeRecord]:
        try:
            resp = self._session.get(self._people_url(query), timeout=self._timeout)
            resp.raise_for_status()
            payload = resp.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise HumaansError(f"Humaans API request failed: {e}", status_code=status) from e
        except requests.RequestException as e:
            raise HumaansError(f"Humaans API request failed: {e}") from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise HumaansError("Unexpected people response: missing data list")
        return [EmployeeRecord.from_json(item) for item in data if isinstance(item, dict)]

    def lookup(self, query: str | None = None) -> list[EmployeeRecord] | str | Literal[False]:
        """Query the people directory.

        Without ``query`` the full directory is returned. With a filter such as
        ``email=someone@example.com`` the GitHub username of the first match is
        returned, or ``False`` when there is no match or the match has no linked
        GitHub account.

        Raises:
            HumaansError: on any request failure.
        """

        people = self._get_people(query)
        if query is None:
            return people
        if people and people[0].github:
            return people[0].github
        return False

    def list_people(self) -> list[EmployeeRecord]:
        people = self._get_people(None)
        logger.info("Fetched employee directory", extra={"count": len(people)})
        return people

    def find_github_username(self, email: str) -> str | None:
        """Resolve an email address to the linked GitHub username, if any."""

        result = self.lookup(urlencode({"email": email.strip()}))
        if isinstance(result, str):
            return result
        return None

    def close(self) -> None:
        self._session.close()


def is_known_github_user(employees: list[EmployeeRecord], username: str) -> bool:
    """Return True if any employee record links ``username`` as its GitHub account."""

    return any(employee.github == username for employee in employees)
