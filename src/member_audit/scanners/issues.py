# src/member_audit/scanners/issues.py
"""Issue and comment scanners.

All three share the same record shape: an optional `user` object and a
`created_at` timestamp. A missing user (ghost or anonymized account) still
produces an event without an actor login; the engine drops such events
instead of reporting them as unrecognized authors.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from member_audit.models import ActivityEvent, SignalKind, parse_timestamp
from member_audit.scanners.base import BaseScanner, user_login
from member_audit.transport import ActivitySource, since_datetime


class _AuthoredScanner(BaseScanner):
    def to_event(self, repository: str, record: dict[str, Any]) -> ActivityEvent | None:
        return ActivityEvent(
            signal=self.signal,
            repository=repository,
            actor_login=user_login(record),
            timestamp=record.get("created_at"),
        )


class IssueScanner(_AuthoredScanner):
    """Issues opened since the cutoff date.

    The listing's `since` filter matches on update time, so issues that
    were only touched after the cutoff are filtered out here by their
    creation time.
    """

    signal = SignalKind.ISSUE
    label = "issues"

    def fetch(self, source: ActivitySource, repository: str, since: date) -> Any:
        cutoff = since_datetime(since)
        for record in source.issues_since(repository, since):
            created = parse_timestamp(record.get("created_at"))
            if created is not None and created < cutoff:
                continue
            yield record


class IssueCommentScanner(_AuthoredScanner):
    """Comments on issues since the cutoff date."""

    signal = SignalKind.ISSUE_COMMENT
    label = "issue comments"

    def fetch(self, source: ActivitySource, repository: str, since: date) -> Any:
        return source.issue_comments_since(repository, since)


class PullRequestCommentScanner(_AuthoredScanner):
    """Review comments on pull requests since the cutoff date."""

    signal = SignalKind.PULL_REQUEST_COMMENT
    label = "pull request comments"

    def fetch(self, source: ActivitySource, repository: str, since: date) -> Any:
        return source.pr_comments_since(repository, since)
