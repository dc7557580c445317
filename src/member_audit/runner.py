# src/member_audit/runner.py
"""End-to-end scan of one repository range.

Order matters for what survives a failed run:

1. roster fetch, then all_members.csv
2. repository fetch, then repositories.csv
3. range check against the repository count
4. classification of the slice
5. active report and unrecognized-authors report

The two reports of step 5 are only written after step 4 completes, so a
run that dies halfway leaves the snapshots but no partial report.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from member_audit.config import AuditConfig, RangeError
from member_audit.engine import ActivityClassifier
from member_audit.loader import load_repositories, load_roster
from member_audit.models import ClassificationResult, RunRange
from member_audit.reports import write_active_report, write_unrecognized_report
from member_audit.transport import ActivitySource
from member_audit.utils.constants import (
    IMPLIED_BY_SCOPES,
    MEMBERS_SNAPSHOT_FILE,
    REPOSITORIES_SNAPSHOT_FILE,
    REQUIRED_SCOPES,
)


logger = logging.getLogger(__name__)


class AuditOutcome(BaseModel):
    """Result of run_audit and the paths of everything it wrote."""

    run_range: RunRange
    result: ClassificationResult
    repository_count: int
    artifacts: dict[str, Path] = Field(default_factory=dict)

    @property
    def active_logins(self) -> list[str]:
        return self.result.active_logins


def run_audit(
    config: AuditConfig,
    source: ActivitySource,
    classifier: ActivityClassifier | None = None,
) -> AuditOutcome:
    """Load members and repositories, classify the range, write reports.

    Raises:
        RangeError: If the range ends past the last repository (after the
            snapshots have been written)
    """
    output_dir = config.output_dir
    run_range = config.run_range
    classifier = classifier or ActivityClassifier(source)
    artifacts: dict[str, Path] = {}

    roster = load_roster(
        source,
        config.organization,
        fetch_email=config.fetch_email,
        output_dir=output_dir,
    )
    artifacts["members"] = output_dir / MEMBERS_SNAPSHOT_FILE

    repositories = load_repositories(source, config.organization, output_dir=output_dir)
    artifacts["repositories"] = output_dir / REPOSITORIES_SNAPSHOT_FILE

    try:
        run_range.validate_for(len(repositories))
    except ValueError as e:
        raise RangeError(str(e)) from e

    result = classifier.classify(roster, run_range.select(repositories), config.since)

    artifacts["active"] = write_active_report(
        result.roster.active_members(), run_range, output_dir
    )
    artifacts["unrecognized"] = write_unrecognized_report(
        result.unrecognized_authors, output_dir
    )
    logger.info(
        "%d of %d members active in repos %d-%d; %d unrecognized authors",
        len(result.active_logins),
        len(roster),
        config.start,
        config.finish,
        len(result.unrecognized_authors),
    )

    return AuditOutcome(
        run_range=run_range,
        result=result,
        repository_count=len(repositories),
        artifacts=artifacts,
    )


def missing_scopes(granted: Iterable[str]) -> list[str]:
    """Required scopes that neither `granted` nor a broader granted scope covers."""
    granted = set(granted)
    return [
        scope
        for scope in REQUIRED_SCOPES
        if scope not in granted
        and not granted.intersection(IMPLIED_BY_SCOPES.get(scope, ()))
    ]


def run_check(source: ActivitySource) -> dict[str, Any]:
    """Report who the token belongs to, its scopes and the rate limit."""
    login = source.authenticated_as()
    scopes = source.scopes()
    remaining, limit = source.rate_limit()
    missing = missing_scopes(scopes)

    logger.info("Authenticated as: %s", login)
    logger.info("Scopes: %s", ",".join(scopes))
    if missing:
        logger.warning("Missing scopes: %s", ",".join(missing))
    logger.info("Rate limit: %d/%d", remaining, limit)

    return {
        "login": login,
        "scopes": scopes,
        "missing_scopes": missing,
        "rate_limit": {"remaining": remaining, "limit": limit},
    }
