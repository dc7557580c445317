# src/member_audit/loader.py
"""Roster and repository loading.

Both loaders fetch the complete listing and write a snapshot before any
classification starts, so the snapshots survive a run that later fails
(rate limit, network). The repository snapshot also tells the operator how
many rows exist when planning ranges.

The read_* helpers load CSV artifacts back for reconciliation.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import polars as pl

from member_audit.models import Member, Roster
from member_audit.reports import write_members_snapshot, write_repositories_snapshot
from member_audit.transport import ActivitySource


logger = logging.getLogger(__name__)


# ============================================================
# API loaders
# ============================================================


def load_roster(
    source: ActivitySource,
    organization: str,
    *,
    fetch_email: bool = False,
    output_dir: str | Path = ".",
) -> Roster:
    """Fetch all members of the organization, all marked inactive.

    Args:
        source: API access
        organization: Organization login
        fetch_email: Resolve each member's email (one extra call per member)
        output_dir: Directory receiving all_members.csv

    Returns:
        Roster in API order
    """
    logger.info("Finding %s members", organization)
    members = []
    for record in source.list_org_members(organization):
        login = record["login"]
        email = source.user_email(login) if fetch_email else None
        members.append(Member(login=login, email=email))
    logger.info("%d members found", len(members))

    roster = Roster(members)
    write_members_snapshot(roster.members, output_dir)
    return roster


def load_repositories(
    source: ActivitySource,
    organization: str,
    *,
    output_dir: str | Path = ".",
) -> list[str]:
    """Fetch the full names of all repositories in the organization."""
    logger.info("Gathering a list of repositories")
    repositories = [record["full_name"] for record in source.list_org_repos(organization)]
    logger.info("%d repositories discovered", len(repositories))

    write_repositories_snapshot(repositories, output_dir)
    return repositories


# ============================================================
# CSV readers
# ============================================================


def read_members(path: str | Path) -> pl.DataFrame:
    """Load a roster snapshot (login, email)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Path not found: {path}")
    return pl.read_csv(path, schema_overrides={"login": pl.Utf8, "email": pl.Utf8})


def read_member_logins(path: str | Path) -> list[str]:
    return read_members(path)["login"].to_list()


def read_active_logins(paths: Iterable[str | Path]) -> list[set[str]]:
    """Load the login set of each partition report.

    Header-only reports yield empty sets.
    """
    sets = []
    for path in paths:
        df = read_members(path)
        sets.append(set(df["login"].drop_nulls().to_list()))
    return sets


def read_repositories(path: str | Path) -> list[str]:
    """Load a repository snapshot, in row order."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Path not found: {path}")
    df = pl.read_csv(path, schema_overrides={"repositories": pl.Utf8})
    return df["repositories"].to_list()
