# src/member_audit/reports.py
"""CSV artifacts written by a run.

Every artifact is a polars DataFrame written with a header row, so an empty
input still produces a readable file. Unresolved emails are written as
empty cells.

Artifacts:
- all_members.csv: roster snapshot (login, email)
- repositories.csv: repository snapshot (repositories)
- active_users_for_repos-{start}-to-{finish}.csv: active members of a slice
- unrecognized_authors.csv: commit authors without an account (name, email)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

import polars as pl

from member_audit.models import Member, RunRange, UnrecognizedAuthor
from member_audit.utils.constants import (
    ACTIVE_REPORT_TEMPLATE,
    MEMBER_COLUMNS,
    MEMBERS_SNAPSHOT_FILE,
    REPOSITORIES_SNAPSHOT_FILE,
    REPOSITORY_COLUMNS,
    UNRECOGNIZED_AUTHORS_FILE,
    UNRECOGNIZED_COLUMNS,
)


logger = logging.getLogger(__name__)


def active_report_name(run_range: RunRange) -> str:
    """File name of the active-members report for a range.

    Runs over different ranges get different names, so parallel runs never
    overwrite each other's reports.
    """
    return ACTIVE_REPORT_TEMPLATE.format(label=run_range.label)


_ACTIVE_REPORT_PATTERN = re.compile(r"^active_users_for_repos-(\d+)-to-(\d+)\.csv$")


def parse_active_report_name(path: str | Path) -> RunRange | None:
    """Recover the range from an active report file name, if it is one."""
    match = _ACTIVE_REPORT_PATTERN.match(Path(path).name)
    if match is None:
        return None
    return RunRange(start_row=int(match.group(1)), finish_row=int(match.group(2)))


# ============================================================
# DataFrame builders
# ============================================================


def members_frame(members: Iterable[Member]) -> pl.DataFrame:
    rows = [{"login": m.login, "email": m.email} for m in members]
    return pl.DataFrame(rows, schema={c: pl.Utf8 for c in MEMBER_COLUMNS})


def repositories_frame(repositories: Sequence[str]) -> pl.DataFrame:
    return pl.DataFrame(
        {REPOSITORY_COLUMNS[0]: list(repositories)},
        schema={c: pl.Utf8 for c in REPOSITORY_COLUMNS},
    )


def unrecognized_frame(authors: Iterable[UnrecognizedAuthor]) -> pl.DataFrame:
    rows = [{"name": a.name, "email": a.email} for a in authors]
    return pl.DataFrame(rows, schema={c: pl.Utf8 for c in UNRECOGNIZED_COLUMNS})


# ============================================================
# Writers
# ============================================================


def _write(df: pl.DataFrame, output_dir: str | Path, name: str) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / name
    df.write_csv(path)
    return path


def write_members_snapshot(members: Sequence[Member], output_dir: str | Path) -> Path:
    path = _write(members_frame(members), output_dir, MEMBERS_SNAPSHOT_FILE)
    logger.info("Members saved in %s", path)
    return path


def write_repositories_snapshot(
    repositories: Sequence[str], output_dir: str | Path
) -> Path:
    path = _write(repositories_frame(repositories), output_dir, REPOSITORIES_SNAPSHOT_FILE)
    logger.info("Repos saved in %s", path)
    return path


def write_active_report(
    active_members: Sequence[Member],
    run_range: RunRange,
    output_dir: str | Path,
) -> Path:
    """Write the members active within one range."""
    for member in active_members:
        logger.info("%s is active in the repositories we've accessed", member.login)
    return _write(members_frame(active_members), output_dir, active_report_name(run_range))


def write_unrecognized_report(
    authors: Sequence[UnrecognizedAuthor], output_dir: str | Path
) -> Path:
    """Write every unrecognized commit author, duplicates included."""
    for author in authors:
        logger.info("%s <%s> is unrecognized", author.name, author.email)
    return _write(unrecognized_frame(authors), output_dir, UNRECOGNIZED_AUTHORS_FILE)
