"""Cross-reference identities against an organization's commit history.

The checker owns the console report and decides, per upstream call, what a
failure means for the run:

- repository listing and commit lookups are absorbed (logged, replaced by an
  empty list / "no contribution")
- Humaans lookups are propagated, since the report is meaningless without them
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import TypeVar

from org_contributions.github.client import GitHubClient, Repository
from org_contributions.humaans.client import EmployeeRecord, HumaansClient, is_known_github_user
from org_contributions.outcome import CallResult, Disposition, call

logger = logging.getLogger(__name__)

T = TypeVar("T")

LIST_REPOSITORIES = "list_repositories"
CHECK_CONTRIBUTION = "check_contribution"
RESOLVE_EMAIL = "resolve_email"
LIST_EMPLOYEES = "list_employees"

DISPOSITIONS: dict[str, Disposition] = {
    LIST_REPOSITORIES: Disposition.ABSORB,
    CHECK_CONTRIBUTION: Disposition.ABSORB,
    RESOLVE_EMAIL: Disposition.PROPAGATE,
    LIST_EMPLOYEES: Disposition.PROPAGATE,
}


@dataclass(frozen=True, slots=True)
class IdentityReport:
    """Result of checking one identity against every listed repository."""

    identity: str
    is_employee: bool
    contributed_to: tuple[str, ...]

    @property
    def has_contributed(self) -> bool:
        return bool(self.contributed_to)


class ContributionChecker:
    """Runs the identity × repository cross-reference and prints the report."""

    def __init__(
        self,
        *,
        github: GitHubClient,
        humaans: HumaansClient | None = None,
        workers: int = 1,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._github = github
        self._humaans = humaans
        self._workers = workers

    def _settle(
        self,
        operation: str,
        result: CallResult[T],
        *,
        fallback: T,
        message: str,
        **context: object,
    ) -> T:
        failure = result.failure
        if failure is None:
            return result.unwrap()

        # Propagated failures are logged once, by whoever handles them.
        if DISPOSITIONS[operation] is Disposition.PROPAGATE:
            return result.unwrap()

        logger.error(
            f"{message}: {failure.message}",
            extra={"operation": operation, "failure_kind": failure.kind.value, **context},
        )
        return fallback

    def _require_humaans(self) -> HumaansClient:
        if self._humaans is None:
            raise RuntimeError("A Humaans client is required to resolve emails")
        return self._humaans

    def resolve_emails(self, emails: Iterable[str]) -> list[str]:
        """Map each email to its linked GitHub username, dropping misses."""

        humaans = self._require_humaans()
        usernames: list[str] = []
        for email in emails:
            username = self._settle(
                RESOLVE_EMAIL,
                call(lambda: humaans.find_github_username(email)),
                fallback=None,
                message=f"Error looking up {email} in Humaans",
                email=email,
            )
            if username:
                usernames.append(username)
                logger.info("Resolved email", extra={"email": email, "github": username})
                print(f"GitHub username for {email}: {username}")
            else:
                print(f"No GitHub username found for {email}")
        return usernames

    def list_repositories(self, org: str) -> list[Repository]:
        return self._settle(
            LIST_REPOSITORIES,
            call(lambda: self._github.list_org_repositories(org)),
            fallback=[],
            message=f"Error fetching repositories for organization {org}",
            org=org,
        )

    def list_employees(self) -> list[EmployeeRecord]:
        if self._humaans is None:
            logger.warning("HUMAANS_API_KEY not set; skipping employee directory lookup")
            return []
        humaans = self._humaans
        return self._settle(
            LIST_EMPLOYEES,
            call(humaans.list_people),
            fallback=[],
            message="Error fetching the Humaans employee directory",
        )

    def has_contributed(self, repository: Repository, identity: str) -> bool:
        return self._settle(
            CHECK_CONTRIBUTION,
            call(lambda: self._github.has_commits_by_author(repository, identity)),
            fallback=False,
            message=f"Error fetching commits for user {identity} in repo {repository.full_name}",
            repository=repository.full_name,
            identity=identity,
        )

    def contributions_for(self, identity: str, repositories: list[Repository]) -> list[Repository]:
        """Return the repositories ``identity`` committed to, in listing order."""

        if self._workers == 1 or len(repositories) < 2:
            return [repo for repo in repositories if self.has_contributed(repo, identity)]

        hits: list[tuple[int, Repository]] = []
        with ThreadPoolExecutor(max_workers=self._workers) as pool:
            futures = {
                pool.submit(self.has_contributed, repo, identity): (index, repo)
                for index, repo in enumerate(repositories)
            }
            for future in as_completed(futures):
                if future.result():
                    hits.append(futures[future])
        hits.sort(key=lambda hit: hit[0])
        return [repo for _, repo in hits]

    def check_identity(
        self,
        identity: str,
        repositories: list[Repository],
        employees: list[EmployeeRecord],
    ) -> IdentityReport:
        print()
        print(f"Checking contributions for {identity}:")

        is_employee = is_known_github_user(employees, identity)
        if is_employee:
            print(">> This GitHub username is related to an employee <<")

        contributed = self.contributions_for(identity, repositories)
        for repo in contributed:
            print(f"  - Contributed to: {repo.full_name}")
        if not contributed:
            print(f"  No contributions found for {identity}.")

        return IdentityReport(
            identity=identity,
            is_employee=is_employee,
            contributed_to=tuple(repo.full_name for repo in contributed),
        )

    def run(self, org: str, identities: Iterable[str]) -> list[IdentityReport]:
        repositories = self.list_repositories(org)

        print()
        print(f'Repositories found in the organization "{org}":')
        for repo in repositories:
            print(f"  - {repo.full_name}")
        print()
        print("Proceeding to check contributions for the provided users...")

        employees = self.list_employees()
        return [self.check_identity(identity, repositories, employees) for identity in identities]

