"""Unit tests for the GitHub REST client (mocked session)."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any
from unittest.mock import Mock, call

import pytest
import requests

from org_contributions.errors import GitHubError
from org_contributions.github.client import GitHubClient, Repository


def _repo(full_name: str, size: int) -> dict[str, Any]:
    owner, _ = full_name.split("/", 1)
    return {"full_name": full_name, "size": size, "owner": {"login": owner}}


def _client(session: Mock, **kwargs: Any) -> GitHubClient:
    return GitHubClient(token="test-token", session=session, **kwargs)


def test_client_requires_token(session: Mock) -> None:
    with pytest.raises(ValueError, match="GitHub token is required"):
        GitHubClient(token="", session=session)


def test_client_sets_auth_headers(session: Mock) -> None:
    _client(session)

    assert session.headers["Authorization"] == "Bearer test-token"
    assert session.headers["Accept"] == "application/vnd.github+json"
    assert session.headers["X-GitHub-Api-Version"] == "2022-11-28"


def test_list_org_repositories_pages_until_empty(
    session: Mock, response: Callable[..., Mock]
) -> None:
    session.get.side_effect = [
        response([_repo("octo-org/a", 10), _repo("octo-org/b", 3)]),
        response([_repo("octo-org/c", 7)]),
        response([]),
    ]
    client = _client(session)

    repos = client.list_org_repositories("octo-org")

    assert [r.full_name for r in repos] == ["octo-org/a", "octo-org/b", "octo-org/c"]
    url = "https://api.github.com/orgs/octo-org/repos"
    assert session.get.call_args_list == [
        call(url, params={"per_page": 100, "page": 1}, timeout=30.0),
        call(url, params={"per_page": 100, "page": 2}, timeout=30.0),
        call(url, params={"per_page": 100, "page": 3}, timeout=30.0),
    ]


def test_list_org_repositories_drops_empty_repositories(
    session: Mock, response: Callable[..., Mock]
) -> None:
    session.get.side_effect = [
        response([_repo("org/a", 10), _repo("org/b", 0), _repo("org/c", 1)]),
        response([]),
    ]

    repos = _client(session).list_org_repositories("org")

    assert [r.full_name for r in repos] == ["org/a", "org/c"]
    assert all(r.size > 0 for r in repos)


def test_list_org_repositories_for_empty_org(
    session: Mock, response: Callable[..., Mock]
) -> None:
    session.get.side_effect = [response([])]

    assert _client(session).list_org_repositories("empty-org") == []
    assert session.get.call_count == 1


def test_list_org_repositories_failure_aborts_listing(
    session: Mock, response: Callable[..., Mock]
) -> None:
    session.get.side_effect = [
        response([_repo("org/a", 10)]),
        response({"message": "Server Error"}, status_code=502),
    ]

    with pytest.raises(GitHubError) as excinfo:
        _client(session).list_org_repositories("org")

    assert excinfo.value.status_code == 502
    assert session.get.call_count == 2


def test_list_org_repositories_transport_error(session: Mock) -> None:
    session.get.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(GitHubError) as excinfo:
        _client(session).list_org_repositories("org")

    assert excinfo.value.status_code is None
    assert "connection refused" in str(excinfo.value)


def test_list_org_repositories_rejects_non_list_payload(
    session: Mock, response: Callable[..., Mock]
) -> None:
    session.get.side_effect = [response({"message": "Not a list"})]

    with pytest.raises(GitHubError, match="expected a list"):
        _client(session).list_org_repositories("org")


def test_has_commits_by_author(session: Mock, response: Callable[..., Mock]) -> None:
    session.get.side_effect = [response([{"sha": "abc123"}]), response([])]
    client = _client(session, base_url="https://ghe.example.com/api/v3/", timeout=5.0)
    repo = Repository(full_name="org/a", size=10, owner="org")

    assert client.has_commits_by_author(repo, "alice-gh") is True
    assert client.has_commits_by_author("org/b", "alice-gh") is False

    assert session.get.call_args_list[0] == call(
        "https://ghe.example.com/api/v3/repos/org/a/commits",
        params={"author": "alice-gh", "per_page": 1},
        timeout=5.0,
    )


def test_has_commits_by_author_http_error(session: Mock, response: Callable[..., Mock]) -> None:
    session.get.side_effect = [response({"message": "Not Found"}, status_code=404)]

    with pytest.raises(GitHubError) as excinfo:
        _client(session).has_commits_by_author("org/gone", "alice-gh")

    assert excinfo.value.status_code == 404


def test_repo_url_has_no_trailing_slash(session: Mock) -> None:
    client = _client(session, base_url="https://api.github.com/")

    assert (
        client._repo_url(repository="org/repo/", path="")
        == "https://api.github.com/repos/org/repo"
    )
    assert (
        client._repo_url(repository="org/repo", path="commits")
        == "https://api.github.com/repos/org/repo/commits"
    )


def test_repository_from_json_defaults() -> None:
    repo = Repository.from_json({"full_name": "org/a"})

    assert repo == Repository(full_name="org/a", size=0, owner="org")
    assert repo.is_empty


def test_repository_from_json_requires_full_name() -> None:
    with pytest.raises(GitHubError):
        Repository.from_json({"size": 10})


def test_close_closes_session(session: Mock) -> None:
    _client(session).close()

    session.close.assert_called_once_with()


def test_each_thread_gets_its_own_session(
    monkeypatch: pytest.MonkeyPatch, response: Callable[..., Mock]
) -> None:
    real_session = requests.Session
    created: list[Mock] = []

    def new_session() -> Mock:
        fake = Mock(spec=real_session)
        fake.headers = {}
        fake.get.return_value = response([{"sha": "abc123"}])
        created.append(fake)
        return fake

    monkeypatch.setattr(requests, "Session", new_session)
    client = GitHubClient(token="test-token")
    barrier = threading.Barrier(2)

    def check() -> None:
        barrier.wait()
        client.has_commits_by_author("org/a", "alice-gh")
        client.has_commits_by_author("org/b", "alice-gh")

    threads = [threading.Thread(target=check) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(created) == 2
    for fake in created:
        assert fake.headers["Authorization"] == "Bearer test-token"
        assert fake.get.call_count == 2

    client.close()
    for fake in created:
        fake.close.assert_called_once_with()
