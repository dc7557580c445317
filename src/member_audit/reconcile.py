# src/member_audit/reconcile.py
"""Cross-run reconciliation.

A scan only reports who was active within one repository range. Once every
range has been scanned, the members missing from all partition reports are
the truly inactive ones:

    inactive = roster - (active_1 | active_2 | ... | active_n)

Reconciliation only reads CSV artifacts and never calls the API.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

import polars as pl

from member_audit.loader import read_active_logins, read_members
from member_audit.utils.constants import INACTIVE_MEMBERS_FILE


def find_inactive_logins(
    roster_logins: Sequence[str],
    active_sets: Iterable[Iterable[str]],
) -> list[str]:
    """Logins absent from every active set, in roster order."""
    active: set[str] = set()
    for logins in active_sets:
        active.update(logins)
    return [login for login in roster_logins if login not in active]


def reconcile_reports(
    members_csv: str | Path,
    active_csvs: Sequence[str | Path],
) -> pl.DataFrame:
    """Build the inactive-members table from a snapshot and partition reports.

    Args:
        members_csv: Path to all_members.csv
        active_csvs: Paths to every active_users_for_repos-*.csv

    Returns:
        DataFrame with login and email of inactive members

    Raises:
        ValueError: If no partition report is given
    """
    if not active_csvs:
        raise ValueError("At least one active report is required")

    members = read_members(members_csv)
    inactive = find_inactive_logins(
        members["login"].to_list(), read_active_logins(active_csvs)
    )
    return members.filter(pl.col("login").is_in(inactive))


def write_inactive_report(df: pl.DataFrame, output_dir: str | Path) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / INACTIVE_MEMBERS_FILE
    df.write_csv(path)
    return path


# ============================================================
# Range planning
# ============================================================


def plan_ranges(total: int, size: int) -> list[tuple[int, int]]:
    """Split `total` repository rows into consecutive 1-based ranges.

    Example:
        >>> plan_ranges(7, 3)
        [(1, 3), (4, 6), (7, 7)]
    """
    if size < 1:
        raise ValueError(f"Range size must be positive: {size}")
    if total < 0:
        raise ValueError(f"Total must not be negative: {total}")
    return [(start, min(start + size - 1, total)) for start in range(1, total + 1, size)]


def missing_rows(ranges: Iterable[tuple[int, int]], total: int) -> list[int]:
    """1-based rows of a `total`-row list that no range covers."""
    covered: set[int] = set()
    for start, finish in ranges:
        covered.update(range(start, finish + 1))
    return [row for row in range(1, total + 1) if row not in covered]
