"""Configuration for the contribution checker.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Only the two API credentials matter for correctness; everything else has a
sensible default.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchMode(str, Enum):
    """How the values in the input file should be interpreted."""

    GITHUB = "github"
    HUMAANS = "humaans"


class Settings(BaseSettings):
    """Settings for a single run.

    Environment variables:
    - GITHUB_TOKEN
    - HUMAANS_API_KEY
    - GITHUB_BASE_URL        (optional)
    - HUMAANS_BASE_URL       (optional)
    - LOG_LEVEL              (optional)
    - HTTP_TIMEOUT_SECONDS   (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `Settings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    humaans_api_key: str = Field(
        default="",
        validation_alias="HUMAANS_API_KEY",
        description="Humaans API key used to query the people directory",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )
    humaans_base_url: str = Field(
        default="https://app.humaans.io/api",
        validation_alias="HUMAANS_BASE_URL",
        description="Humaans API base URL",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="HTTP_TIMEOUT_SECONDS",
        description="Timeout applied to every outgoing HTTP request",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_some_credential(self) -> Settings:
        if not self.github_token.strip() and not self.humaans_api_key.strip():
            raise ValueError("GITHUB_TOKEN or HUMAANS_API_KEY is required")
        return self

    @property
    def has_github_token(self) -> bool:
        return bool(self.github_token.strip())

    @property
    def has_humaans_key(self) -> bool:
        return bool(self.humaans_api_key.strip())

    def missing_credentials(self, mode: SearchMode) -> list[str]:
        """Return the environment variables ``mode`` needs but that are unset.

        Username search only talks to GitHub. Email search resolves through
        Humaans first, so it needs both.
        """

        missing: list[str] = []
        if not self.has_github_token:
            missing.append("GITHUB_TOKEN")
        if mode is SearchMode.HUMAANS and not self.has_humaans_key:
            missing.append("HUMAANS_API_KEY")
        return missing
