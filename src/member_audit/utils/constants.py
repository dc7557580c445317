# src/member_audit/utils/constants.py
"""Constants shared by the scanners, report writers and CLI.

File names and column sets are part of the operator contract: partition
reports from several runs are merged by name, so changing them breaks
reconciliation of reports produced by older runs.

Reference:
- https://docs.github.com/en/rest/orgs/members
- https://docs.github.com/en/rest/commits/commits#list-commits
"""

from __future__ import annotations

from typing import Final


# ============================================================
# Output artifacts
# ============================================================

MEMBERS_SNAPSHOT_FILE: Final[str] = "all_members.csv"
REPOSITORIES_SNAPSHOT_FILE: Final[str] = "repositories.csv"
UNRECOGNIZED_AUTHORS_FILE: Final[str] = "unrecognized_authors.csv"
INACTIVE_MEMBERS_FILE: Final[str] = "inactive_members.csv"

# Formatted with RunRange.label, e.g. "active_users_for_repos-0-to-29.csv"
ACTIVE_REPORT_TEMPLATE: Final[str] = "active_users_for_repos-{label}.csv"

MEMBER_COLUMNS: Final[tuple[str, ...]] = ("login", "email")
REPOSITORY_COLUMNS: Final[tuple[str, ...]] = ("repositories",)
UNRECOGNIZED_COLUMNS: Final[tuple[str, ...]] = ("name", "email")


# ============================================================
# Transport / environment
# ============================================================

DEFAULT_API_URL: Final[str] = "https://api.github.com"

# First match wins
TOKEN_ENV_VARS: Final[tuple[str, ...]] = ("GITHUB_TOKEN", "OCTOKIT_ACCESS_TOKEN")
API_URL_ENV_VARS: Final[tuple[str, ...]] = ("GITHUB_API_URL", "OCTOKIT_API_ENDPOINT")

REQUIRED_SCOPES: Final[tuple[str, ...]] = (
    "read:org",
    "read:user",
    "repo",
    "user:email",
)

# Broader scopes that include a required one
# https://docs.github.com/en/apps/oauth-apps/building-oauth-apps/scopes-for-oauth-apps
IMPLIED_BY_SCOPES: Final[dict[str, tuple[str, ...]]] = {
    "read:org": ("write:org", "admin:org"),
    "read:user": ("user",),
    "user:email": ("user",),
}

PAGE_SIZE: Final[int] = 100


# ============================================================
# Logging
# ============================================================

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(message)s"
