"""Check whether people have contributed to a GitHub organization.

Search values are GitHub usernames, or emails resolved to usernames through
the Humaans people directory.
"""

__version__ = "1.0.0"

from org_contributions.config import SearchMode, Settings

__all__ = ["__version__", "SearchMode", "Settings"]
