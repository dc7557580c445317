# src/member_audit/transport.py
"""Access to the GitHub REST API.

The scanners and loaders only depend on the ActivitySource protocol, which
returns already-paginated sequences of plain dict records shaped like the
REST responses. GithubSource implements it on top of PyGithub, which takes
care of authentication and pagination.

"No data" answers from the API arrive as HTTP errors rather than empty
pages:
- 404 when a commit range is out of bounds, or when the repository is a
  private fork (security advisories) the token cannot read
- 409 when the repository is empty

Both are raised as SourceUnavailable subclasses so the scanners can treat
them as zero events. Every other error propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from datetime import UTC, date, datetime, time
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from github import Auth, Github, GithubException

from member_audit.utils.constants import DEFAULT_API_URL, PAGE_SIZE

if TYPE_CHECKING:
    from member_audit.config import TransportSettings


logger = logging.getLogger(__name__)

Record = dict[str, Any]


class SourceUnavailable(Exception):
    """A signal source has no readable data for a repository."""

    def __init__(self, repository: str, message: str = "") -> None:
        self.repository = repository
        super().__init__(message or f"No data available for {repository}")


class SourceNotFound(SourceUnavailable):
    """The API answered 404 for this repository and signal."""


class SourceConflict(SourceUnavailable):
    """The API answered 409 (typically an empty repository)."""


@runtime_checkable
class ActivitySource(Protocol):
    """Protocol for the API calls the audit needs."""

    def list_org_members(self, organization: str) -> Iterable[Record]: ...

    def list_org_repos(self, organization: str) -> Iterable[Record]: ...

    def user_email(self, login: str) -> str | None: ...

    def commits_since(self, repository: str, since: date) -> Iterable[Record]: ...

    def issues_since(self, repository: str, since: date) -> Iterable[Record]: ...

    def issue_comments_since(self, repository: str, since: date) -> Iterable[Record]: ...

    def pr_comments_since(self, repository: str, since: date) -> Iterable[Record]: ...

    def rate_limit(self) -> tuple[int, int]: ...

    def scopes(self) -> list[str]: ...

    def authenticated_as(self) -> str | None: ...


def since_datetime(since: date) -> datetime:
    """Midnight UTC at the start of the cutoff date."""
    if isinstance(since, datetime):
        return since if since.tzinfo else since.replace(tzinfo=UTC)
    return datetime.combine(since, time.min, tzinfo=UTC)


def _user_record(user: Any) -> Record | None:
    if user is None:
        return None
    return {"login": user.login}


class GithubSource:
    """ActivitySource backed by a PyGithub client."""

    def __init__(self, client: Github) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: TransportSettings) -> GithubSource:
        kwargs: dict[str, Any] = {"auth": Auth.Token(settings.token), "per_page": PAGE_SIZE}
        if settings.base_url != DEFAULT_API_URL:
            kwargs["base_url"] = settings.base_url
        return cls(Github(**kwargs))

    @property
    def client(self) -> Github:
        return self._client

    # ============================================================
    # Organization
    # ============================================================

    def list_org_members(self, organization: str) -> Iterator[Record]:
        for user in self._client.get_organization(organization).get_members():
            yield {"login": user.login}

    def list_org_repos(self, organization: str) -> Iterator[Record]:
        for repo in self._client.get_organization(organization).get_repos():
            yield {"full_name": repo.full_name}

    def user_email(self, login: str) -> str | None:
        return self._client.get_user(login).email

    # ============================================================
    # Activity signals
    # ============================================================

    def commits_since(self, repository: str, since: date) -> Iterator[Record]:
        repo = self._client.get_repo(repository, lazy=True)
        return self._paged(
            repository,
            lambda: repo.get_commits(since=since_datetime(since)),
            _commit_record,
        )

    def issues_since(self, repository: str, since: date) -> Iterator[Record]:
        repo = self._client.get_repo(repository, lazy=True)
        return self._paged(
            repository,
            lambda: repo.get_issues(state="all", since=since_datetime(since)),
            _authored_record,
        )

    def issue_comments_since(self, repository: str, since: date) -> Iterator[Record]:
        repo = self._client.get_repo(repository, lazy=True)
        return self._paged(
            repository,
            lambda: repo.get_issues_comments(since=since_datetime(since)),
            _authored_record,
        )

    def pr_comments_since(self, repository: str, since: date) -> Iterator[Record]:
        repo = self._client.get_repo(repository, lazy=True)
        return self._paged(
            repository,
            lambda: repo.get_pulls_review_comments(since=since_datetime(since)),
            _authored_record,
        )

    # ============================================================
    # Diagnostics
    # ============================================================

    def rate_limit(self) -> tuple[int, int]:
        remaining, limit = self._client.rate_limiting
        return remaining, limit

    def authenticated_as(self) -> str | None:
        return self._client.get_user().login

    def scopes(self) -> list[str]:
        # Populated from the X-OAuth-Scopes header of the last response
        if self._client.oauth_scopes is None:
            self.authenticated_as()
        return list(self._client.oauth_scopes or [])

    # ============================================================
    # Private helpers
    # ============================================================

    @staticmethod
    def _paged(
        repository: str,
        fetch: Callable[[], Iterable[Any]],
        to_record: Callable[[Any], Record],
    ) -> Iterator[Record]:
        """Iterate a paginated listing, translating "no data" errors."""
        try:
            for item in fetch():
                yield to_record(item)
        except GithubException as e:
            if e.status == 404:
                raise SourceNotFound(repository, f"404 from {repository}") from e
            if e.status == 409:
                raise SourceConflict(repository, f"409 from {repository}") from e
            raise


def _commit_record(commit: Any) -> Record:
    git_author = commit.commit.author
    return {
        "sha": commit.sha,
        "author": _user_record(commit.author),
        "commit": {
            "author": {
                "name": git_author.name if git_author else None,
                "email": git_author.email if git_author else None,
                "date": git_author.date if git_author else None,
            }
        },
    }


def _authored_record(item: Any) -> Record:
    """Issues, issue comments and review comments share this shape."""
    return {
        "user": _user_record(item.user),
        "created_at": item.created_at,
    }
