# tests/helpers.py
"""In-memory API source and REST-shaped record builders shared by the tests."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date
from typing import Any


# ============================================================
# Fake API source
# ============================================================


class FakeSource:
    """In-memory ActivitySource.

    Signals are keyed by (method name, repository). A value that is an
    exception instance is raised when the listing is iterated, the way
    PyGithub raises on the first page request.
    """

    def __init__(
        self,
        members: Iterable[str] = (),
        repositories: Iterable[str] = (),
        emails: dict[str, str | None] | None = None,
        signals: dict[tuple[str, str], Any] | None = None,
        scopes: Iterable[str] = ("read:org", "read:user", "repo", "user:email"),
        rate_limit: tuple[int, int] = (4999, 5000),
        login: str = "auditor",
    ) -> None:
        self.members = list(members)
        self.repositories = list(repositories)
        self.emails = emails or {}
        self.signals = signals or {}
        self._scopes = list(scopes)
        self._rate_limit = rate_limit
        self._login = login
        self.calls: list[tuple[str, str]] = []

    def _listing(self, name: str, repository: str) -> Iterator[dict[str, Any]]:
        self.calls.append((name, repository))
        value = self.signals.get((name, repository), [])
        if isinstance(value, BaseException):
            raise value
        yield from value

    def list_org_members(self, organization: str) -> Iterator[dict[str, Any]]:
        self.calls.append(("list_org_members", organization))
        return iter([{"login": login} for login in self.members])

    def list_org_repos(self, organization: str) -> Iterator[dict[str, Any]]:
        self.calls.append(("list_org_repos", organization))
        return iter([{"full_name": name} for name in self.repositories])

    def user_email(self, login: str) -> str | None:
        self.calls.append(("user_email", login))
        return self.emails.get(login)

    def commits_since(self, repository: str, since: date) -> Iterator[dict[str, Any]]:
        return self._listing("commits_since", repository)

    def issues_since(self, repository: str, since: date) -> Iterator[dict[str, Any]]:
        return self._listing("issues_since", repository)

    def issue_comments_since(self, repository: str, since: date) -> Iterator[dict[str, Any]]:
        return self._listing("issue_comments_since", repository)

    def pr_comments_since(self, repository: str, since: date) -> Iterator[dict[str, Any]]:
        return self._listing("pr_comments_since", repository)

    def rate_limit(self) -> tuple[int, int]:
        return self._rate_limit

    def scopes(self) -> list[str]:
        return list(self._scopes)

    def authenticated_as(self) -> str | None:
        return self._login


# ============================================================
# Record builders
# ============================================================


def commit_record(
    login: str | None,
    *,
    name: str = "Some One",
    email: str = "someone@example.com",
    date_: str = "2020-09-01T12:00:00Z",
) -> dict[str, Any]:
    return {
        "sha": "0" * 40,
        "author": {"login": login} if login else None,
        "commit": {"author": {"name": name, "email": email, "date": date_}},
    }


def user_record(login: str | None, created_at: str = "2020-09-01T12:00:00Z") -> dict[str, Any]:
    return {"user": {"login": login} if login else None, "created_at": created_at}
