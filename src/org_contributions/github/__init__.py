"""GitHub REST access."""

from org_contributions.github.client import GitHubClient, Repository

__all__ = ["GitHubClient", "Repository"]
