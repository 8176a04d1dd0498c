"""GitHub REST client.

Only the two read-only endpoints needed to answer "did this person commit to
any repository in this organization?" are wrapped here.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests

from org_contributions.errors import GitHubError

logger = logging.getLogger(__name__)

REPOS_PER_PAGE = 100


@dataclass(frozen=True, slots=True)
class Repository:
    """Minimal repository metadata returned from an organization listing."""

    full_name: str
    size: int
    owner: str

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Repository:
        full_name = data.get("full_name")
        if not isinstance(full_name, str) or not full_name.strip():
            raise GitHubError("Unexpected repository payload: missing full_name")

        size = data.get("size")
        owner = data.get("owner")
        login = owner.get("login") if isinstance(owner, dict) else None
        return cls(
            full_name=full_name,
            size=size if isinstance(size, int) else 0,
            owner=login if isinstance(login, str) else full_name.split("/", 1)[0],
        )


class GitHubClient:
    """Small wrapper around `requests` for the GitHub calls we need.

    Contribution checks may run on a thread pool, so each thread gets its own
    `requests.Session`. An injected ``session`` is used as-is from every thread.
    """

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._rest_base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "org-contributions",
        }
        self._shared_session = session
        if session is not None:
            session.headers.update(self._headers)
        self._local = threading.local()
        self._thread_sessions: list[requests.Session] = []
        self._sessions_lock = threading.Lock()

    def _session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session: requests.Session | None = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self._headers)
            self._local.session = session
            with self._sessions_lock:
                self._thread_sessions.append(session)
        return session

    def _org_url(self, *, org: str, path: str) -> str:
        org = org.strip().strip("/")
        if not org:
            raise ValueError("organization is required")
        path = path.strip("/")
        return f"{self._rest_base_url}/orgs/{quote(org, safe='')}/{path}"

    def _repo_url(self, *, repository: str, path: str) -> str:
        repo = repository.strip().strip("/")
        path = path.strip("/")
        if not path:
            return f"{self._rest_base_url}/repos/{repo}"
        return f"{self._rest_base_url}/repos/{repo}/{path}"

    def _get_json(self, url: str, *, params: dict[str, Any] | None = None) -> Any:
        try:
            resp = self._session().get(url, params=params, timeout=self._timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise GitHubError(f"GitHub API request failed: {e}", status_code=status) from e
        except requests.RequestException as e:
            raise GitHubError(f"GitHub API request failed: {e}") from e

    def list_org_repositories(self, org: str) -> list[Repository]:
        """Return every non-empty repository owned by ``org``.

        Pages of 100 are requested until GitHub returns an empty page. A failure
        on any page aborts the whole listing with `GitHubError`.

        Repositories with ``size == 0`` have never been pushed to and are
        dropped.
        """

        url = self._org_url(org=org, path="repos")
        repos: list[Repository] = []
        page = 1
        while True:
            payload = self._get_json(url, params={"per_page": REPOS_PER_PAGE, "page": page})
            if not isinstance(payload, list):
                raise GitHubError("Unexpected repository listing response: expected a list")
            if not payload:
                break

            repos.extend(Repository.from_json(item) for item in payload if isinstance(item, dict))
            logger.debug(
                "Fetched repository page",
                extra={"org": org, "page": page, "count": len(payload)},
            )
            page += 1

        non_empty = [repo for repo in repos if not repo.is_empty]
        logger.info(
            "Listed organization repositories",
            extra={"org": org, "total": len(repos), "non_empty": len(non_empty)},
        )
        return non_empty

    def has_commits_by_author(self, repository: Repository | str, author: str) -> bool:
        """Return True if ``author`` has at least one commit in ``repository``."""

        full_name = repository.full_name if isinstance(repository, Repository) else repository
        url = self._repo_url(repository=full_name, path="commits")
        payload = self._get_json(url, params={"author": author, "per_page": 1})
        if not isinstance(payload, list):
            raise GitHubError("Unexpected commits response: expected a list")
        return len(payload) > 0

    def close(self) -> None:
        if self._shared_session is not None:
            self._shared_session.close()
        with self._sessions_lock:
            sessions, self._thread_sessions = self._thread_sessions, []
        for session in sessions:
            session.close()
