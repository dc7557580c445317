# src/member_audit/models.py
"""Pydantic models for organization members and activity events.

Design principles:
- Immutable value models (frozen=True) for everything that crosses the
  scanner/engine boundary
- A single mutable record per member (MemberActivity) owned by the Roster
- Activation is monotonic: a member can become active, never inactive again
- Timezone-aware timestamps (naive values are treated as UTC)

Reference:
- https://docs.github.com/en/rest/orgs/members#list-organization-members
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SignalKind(StrEnum):
    """Categories of qualifying activity."""

    COMMIT = "commit"
    ISSUE = "issue"
    ISSUE_COMMENT = "issue_comment"
    PULL_REQUEST_COMMENT = "pull_request_comment"


def parse_timestamp(v: Any) -> datetime | None:
    """Parse a timestamp from the formats the REST API and tests use.

    Supports:
    - datetime objects (naive values are assumed UTC)
    - Unix timestamps in seconds or milliseconds
    - ISO 8601 strings, including the "Z" suffix
    """
    if v is None:
        return None
    if isinstance(v, datetime):
        return v if v.tzinfo else v.replace(tzinfo=UTC)
    if isinstance(v, (int, float)):
        # Heuristic: if > 10^12, it's milliseconds
        if v > 1e12:
            return datetime.fromtimestamp(v / 1000, tz=UTC)
        return datetime.fromtimestamp(v, tz=UTC)
    if isinstance(v, str):
        dt = datetime.fromisoformat(v)
        return dt if dt.tzinfo else dt.replace(tzinfo=UTC)
    raise ValueError(f"Cannot parse timestamp: {v}")


class Member(BaseModel):
    """One organization member as listed by the members endpoint.

    Attributes:
        login: Account login, the aggregation key (case-sensitive)
        email: Public email, only resolved when email lookup is enabled
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    login: str = Field(..., min_length=1)
    email: str | None = Field(default=None)

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class MemberActivity(BaseModel):
    """Mutable activity flag for one member during a single run."""

    member: Member
    active: bool = False

    @property
    def login(self) -> str:
        return self.member.login

    def mark_active(self) -> bool:
        """Flag the member as active.

        Returns:
            True if this call changed the flag, False if it was already set
        """
        if self.active:
            return False
        self.active = True
        return True


class Roster:
    """Ordered mapping of login to MemberActivity.

    The roster is the only mutable state of a run. Lookups are exact and
    case-sensitive, matching how logins are reported by the API.

    Example:
        >>> roster = Roster([Member(login="alice"), Member(login="bob")])
        >>> roster.mark_active("alice")
        True
        >>> roster.active_logins()
        ['alice']
    """

    def __init__(self, members: Iterable[Member] = ()) -> None:
        self._records: dict[str, MemberActivity] = {}
        for member in members:
            if member.login in self._records:
                raise ValueError(f"Duplicate member login: {member.login}")
            self._records[member.login] = MemberActivity(member=member)

    @classmethod
    def from_logins(cls, logins: Iterable[str]) -> Roster:
        return cls(Member(login=login) for login in logins)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MemberActivity]:
        return iter(self._records.values())

    def __contains__(self, login: object) -> bool:
        return login in self._records

    @property
    def members(self) -> list[Member]:
        return [record.member for record in self._records.values()]

    def find_by_login(self, login: str | None) -> MemberActivity | None:
        if not login:
            return None
        return self._records.get(login)

    def mark_active(self, login: str | None) -> bool:
        """Mark the member with this login active.

        Unknown logins are ignored, so events from outside collaborators
        never change roster state.

        Returns:
            True if a member transitioned from inactive to active
        """
        record = self.find_by_login(login)
        if record is None:
            return False
        return record.mark_active()

    def logins(self) -> list[str]:
        return list(self._records)

    def active_members(self) -> list[Member]:
        return [r.member for r in self._records.values() if r.active]

    def active_logins(self) -> list[str]:
        return [r.login for r in self._records.values() if r.active]


class ActivityEvent(BaseModel):
    """A single qualifying action found by a scanner.

    Attributes:
        signal: Which scanner produced the event
        repository: Full name of the scanned repository ("owner/name")
        actor_login: Resolved account login, None when the upstream
            record has no linked account
        author_name: Git author name (commit events only)
        author_email: Git author email (commit events only)
        timestamp: When the action happened
    """

    model_config = ConfigDict(frozen=True)

    signal: SignalKind
    repository: str = Field(default="")
    actor_login: str | None = Field(default=None)
    author_name: str | None = Field(default=None)
    author_email: str | None = Field(default=None)
    timestamp: datetime | None = Field(default=None)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_timestamp(cls, v: Any) -> datetime | None:
        return parse_timestamp(v)

    @property
    def is_resolved(self) -> bool:
        return bool(self.actor_login)

    def to_unrecognized(self) -> UnrecognizedAuthor:
        return UnrecognizedAuthor(name=self.author_name, email=self.author_email)


class UnrecognizedAuthor(BaseModel):
    """A commit author that could not be mapped to any account login."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    email: str | None = None


class RunRange(BaseModel):
    """Inclusive, 0-based slice of the enumerated repository list.

    Operators pass 1-based rows on the command line; use from_rows() to
    convert them.
    """

    model_config = ConfigDict(frozen=True)

    start_row: int = Field(..., ge=0)
    finish_row: int = Field(..., ge=0)

    @classmethod
    def from_rows(cls, start: int, finish: int) -> RunRange:
        """Build a range from 1-based inclusive operator rows.

        Raises:
            ValueError: If a row is not positive or start > finish
        """
        if start < 1 or finish < 1:
            raise ValueError(f"Rows are 1-based and must be positive: {start}, {finish}")
        if start > finish:
            raise ValueError(f"Start row {start} is after finish row {finish}")
        return cls(start_row=start - 1, finish_row=finish - 1)

    def __len__(self) -> int:
        return self.finish_row - self.start_row + 1

    @property
    def label(self) -> str:
        return f"{self.start_row}-to-{self.finish_row}"

    def validate_for(self, total: int) -> None:
        """Check that the range fits a repository list of this length."""
        if self.start_row > self.finish_row:
            raise ValueError(f"Empty range {self.label}")
        if self.finish_row >= total:
            raise ValueError(
                f"Range {self.start_row + 1}-{self.finish_row + 1} exceeds "
                f"the {total} repositories available"
            )

    def select(self, repositories: Sequence[str]) -> Sequence[str]:
        return repositories[self.start_row : self.finish_row + 1]


class ClassificationResult(BaseModel):
    """Outcome of classifying one repository slice."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    roster: Roster
    unrecognized_authors: list[UnrecognizedAuthor] = Field(default_factory=list)
    repositories_scanned: int = 0
    events_seen: int = 0

    @property
    def active_logins(self) -> list[str]:
        return self.roster.active_logins()
