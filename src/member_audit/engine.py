# src/member_audit/engine.py
"""Activity classification engine.

For a fixed roster and a bounded slice of repositories, runs every scanner
against every repository and folds the resulting events into the roster:

1. An event whose actor login belongs to a member marks that member active.
2. An event without an actor login is either collected as an unrecognized
   author (commit scanner) or dropped (issue and comment scanners).
3. Events from logins outside the roster change nothing.

Activation only ever goes from inactive to active, so the set of active
members after a slice is independent of the order of repositories, signals
and events. Running the engine over disjoint ranges and taking the union of
the active sets gives the same result as one run over the whole list.

Scanners treat "no data" answers as empty sequences, so one unreadable
signal never stops the remaining signals or repositories. Any other error
(rate limit, network, credentials) propagates and aborts the run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from member_audit.models import (
    ActivityEvent,
    ClassificationResult,
    Roster,
    UnrecognizedAuthor,
)
from member_audit.scanners import DEFAULT_SCANNERS, BaseScanner
from member_audit.transport import ActivitySource


logger = logging.getLogger(__name__)


def fold_events(
    roster: Roster,
    events: Iterable[ActivityEvent],
    *,
    collects_unrecognized: bool,
    unrecognized: list[UnrecognizedAuthor] | None = None,
) -> int:
    """Apply a sequence of events to the roster.

    Args:
        roster: Roster to update in place
        events: Events from one scanner
        collects_unrecognized: Whether unresolved actors are collected
            (True) or dropped (False)
        unrecognized: List receiving unresolved authors; required when
            collects_unrecognized is True

    Returns:
        Number of events consumed
    """
    if collects_unrecognized and unrecognized is None:
        raise ValueError("unrecognized list is required when collecting authors")

    count = 0
    for event in events:
        count += 1
        if not event.is_resolved:
            if collects_unrecognized:
                unrecognized.append(event.to_unrecognized())
            continue
        if roster.mark_active(event.actor_login):
            logger.debug("%s is active (%s in %s)", event.actor_login, event.signal, event.repository)
    return count


class ActivityClassifier:
    """Drives the scanners over a repository slice.

    Example:
        >>> classifier = ActivityClassifier(source)
        >>> result = classifier.classify(roster, ["org/r1", "org/r2"], date(2020, 8, 4))
        >>> result.active_logins
        ['alice']
    """

    def __init__(
        self,
        source: ActivitySource,
        scanners: Sequence[BaseScanner] = DEFAULT_SCANNERS,
    ) -> None:
        self._source = source
        self._scanners = tuple(scanners)

    @property
    def scanners(self) -> tuple[BaseScanner, ...]:
        return self._scanners

    def classify(
        self,
        roster: Roster,
        repositories: Sequence[str],
        since: date,
    ) -> ClassificationResult:
        """Scan each repository of the slice, in list order.

        Args:
            roster: Members to classify; updated in place
            repositories: Full names of the repositories in this slice
            since: Cutoff date

        Returns:
            ClassificationResult holding the roster and unrecognized authors
        """
        total = len(repositories)
        unrecognized: list[UnrecognizedAuthor] = []
        events_seen = 0

        logger.info(
            "Analyzing activity for %d members and %d repos", len(roster), total
        )
        if total:
            logger.info("first repo to be analyzed: %s", repositories[0])
            logger.info("last repo to be analyzed: %s", repositories[-1])

        for completed, repository in enumerate(repositories, start=1):
            remaining, limit = self._source.rate_limit()
            logger.info("rate limit remaining: %d/%d", remaining, limit)
            logger.info("analyzing %s", repository)
            for scanner in self._scanners:
                events_seen += fold_events(
                    roster,
                    scanner.scan(self._source, repository, since),
                    collects_unrecognized=scanner.collects_unrecognized,
                    unrecognized=unrecognized,
                )
            logger.info("...%d/%d repos completed", completed, total)

        return ClassificationResult(
            roster=roster,
            unrecognized_authors=unrecognized,
            repositories_scanned=total,
            events_seen=events_seen,
        )


def classify(
    source: ActivitySource,
    roster: Roster,
    repositories: Sequence[str],
    since: date,
) -> ClassificationResult:
    """Classify a repository slice with the default scanners."""
    return ActivityClassifier(source).classify(roster, repositories, since)
