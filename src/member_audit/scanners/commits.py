# src/member_audit/scanners/commits.py
"""Commit scanner.

Commits are the only signal that reports authors without a linked account:
a git identity that was never associated with a GitHub user (or whose
account was deleted) still appears with its name and email. Those events
carry no actor login and are collected as unrecognized authors.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from member_audit.models import ActivityEvent, SignalKind
from member_audit.scanners.base import BaseScanner, user_login
from member_audit.transport import ActivitySource


class CommitScanner(BaseScanner):
    """Commits on the default branch since the cutoff date."""

    signal = SignalKind.COMMIT
    label = "commits"
    collects_unrecognized = True

    def fetch(
        self, source: ActivitySource, repository: str, since: date
    ) -> Any:
        return source.commits_since(repository, since)

    def to_event(self, repository: str, record: dict[str, Any]) -> ActivityEvent:
        git_author = (record.get("commit") or {}).get("author") or {}
        return ActivityEvent(
            signal=self.signal,
            repository=repository,
            actor_login=user_login(record, "author"),
            author_name=git_author.get("name"),
            author_email=git_author.get("email"),
            timestamp=git_author.get("date"),
        )
