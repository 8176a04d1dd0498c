"""CLI entrypoint for the contribution checker."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from org_contributions import __version__
from org_contributions.checker import ContributionChecker
from org_contributions.config import SearchMode, Settings
from org_contributions.github.client import GitHubClient
from org_contributions.humaans.client import HumaansClient
from org_contributions.identities import DEFAULT_SEARCH_VALUES_FILE, read_search_values
from org_contributions.logging import configure_logging

logger = logging.getLogger(__name__)

_EPILOG = """\
Examples:
  Search by GitHub usernames in an organization:
    $ org-contributions --org my-org --file usernames.txt --github

  Search by emails (via Humaans API):
    $ org-contributions --org my-org --file emails.txt --humaans

Note: --org is *always* required.
"""


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="org-contributions",
        description=(
            "Check GitHub contributions in an organization by searching using GitHub "
            "usernames or emails (via Humaans)"
        ),
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"org-contributions {__version__}"
    )
    parser.add_argument(
        "-o",
        "--org",
        required=True,
        metavar="ORGANIZATION",
        help="GitHub organization name to search within",
    )
    parser.add_argument(
        "-f",
        "--file",
        type=Path,
        default=DEFAULT_SEARCH_VALUES_FILE,
        help="File containing the list of search values (GitHub usernames or emails)",
    )

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-u",
        "--humaans",
        dest="mode",
        action="store_const",
        const=SearchMode.HUMAANS,
        help="Search values are emails to look up via the Humaans API first",
    )
    mode.add_argument(
        "-g",
        "--github",
        dest="mode",
        action="store_const",
        const=SearchMode.GITHUB,
        help="Search values are GitHub usernames",
    )

    parser.add_argument(
        "-w",
        "--workers",
        type=_positive_int,
        default=1,
        help=(
            "Number of repositories to check concurrently per user, each worker "
            "with its own HTTP session (default: 1)"
        ),
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    try:
        settings = Settings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("GitHub or Humaans API token is missing. Set them in the .env file.", file=sys.stderr)
        print(e, file=sys.stderr)
        return 1

    parser = build_parser()
    args = parser.parse_args(argv)

    mode: SearchMode | None = args.mode
    if mode is None:
        print(
            "You must specify either --humaans or --github to indicate the type of search values.",
            file=sys.stderr,
        )
        return 1

    missing = settings.missing_credentials(mode)
    if missing:
        print(
            f"--{mode.value} requires {' and '.join(missing)} to be set (environment or .env).",
            file=sys.stderr,
        )
        return 1

    configure_logging(settings.log_level, org=args.org, mode=mode.value)

    try:
        search_values = read_search_values(args.file)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read search values", extra={"path": str(args.file)})
        print(f"Could not read search values from {args.file}: {e}", file=sys.stderr)
        return 1

    github = GitHubClient(
        token=settings.github_token,
        base_url=settings.github_base_url,
        timeout=settings.http_timeout_seconds,
    )
    humaans: HumaansClient | None = None
    if settings.has_humaans_key:
        humaans = HumaansClient(
            api_key=settings.humaans_api_key,
            base_url=settings.humaans_base_url,
            timeout=settings.http_timeout_seconds,
        )

    try:
        checker = ContributionChecker(github=github, humaans=humaans, workers=args.workers)
        if mode is SearchMode.HUMAANS:
            search_values = checker.resolve_emails(search_values)
        checker.run(args.org, search_values)
        return 0

    except Exception:
        logger.exception("Command failed")
        return 1

    finally:
        github.close()
        if humaans is not None:
            humaans.close()


if __name__ == "__main__":
    raise SystemExit(main())
