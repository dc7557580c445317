# src/member_audit/scanners/base.py
"""Base class for activity signal scanners.

A scanner turns one paginated API listing for one repository into a lazy
sequence of ActivityEvent objects. Scanners are stateless: they read the
repository name and cutoff date and never touch the roster.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from datetime import date
from typing import Any, ClassVar

from member_audit.models import ActivityEvent, SignalKind
from member_audit.transport import ActivitySource, SourceUnavailable


logger = logging.getLogger(__name__)


class BaseScanner(ABC):
    """Abstract base class for all scanners.

    Subclasses set `signal` and `label`, and implement `fetch` and
    `to_event`. Set `collects_unrecognized` when events without a linked
    account should be reported rather than dropped.
    """

    signal: ClassVar[SignalKind]
    label: ClassVar[str]
    collects_unrecognized: ClassVar[bool] = False

    @abstractmethod
    def fetch(
        self, source: ActivitySource, repository: str, since: date
    ) -> Iterable[dict[str, Any]]:
        """Request the raw records for this signal."""
        ...

    @abstractmethod
    def to_event(self, repository: str, record: dict[str, Any]) -> ActivityEvent | None:
        """Convert one raw record, or return None to skip it."""
        ...

    def scan(
        self, source: ActivitySource, repository: str, since: date
    ) -> Iterator[ActivityEvent]:
        """Yield events for one repository.

        The API reports "no data" as 404/409, possibly only once the first
        page is requested, so the whole iteration is guarded: the sequence
        ends early and the caller moves on to the next signal.
        """
        logger.info("...%s", self.label)
        try:
            for record in self.fetch(source, repository, since):
                event = self.to_event(repository, record)
                if event is not None:
                    yield event
        except SourceUnavailable as e:
            logger.info("...no %s in %s (%s)", self.label, repository, e)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def user_login(record: dict[str, Any], key: str = "user") -> str | None:
    """Login of the account nested under `key`, if any."""
    user = record.get(key)
    if not isinstance(user, dict):
        return None
    login = user.get("login")
    return login or None
