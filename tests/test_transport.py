# tests/test_transport.py
"""Tests for the PyGithub-backed source."""

from __future__ import annotations

from datetime import UTC, date, datetime
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from github import GithubException

from member_audit.config import TransportSettings
from member_audit.transport import (
    ActivitySource,
    GithubSource,
    SourceConflict,
    SourceNotFound,
    since_datetime,
)


def _user(login: str) -> SimpleNamespace:
    return SimpleNamespace(login=login)


def _failing(status: int):
    def pages():
        raise GithubException(status, {"message": "error"}, None)
        yield  # pragma: no cover

    return pages()


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def source(client: MagicMock) -> GithubSource:
    return GithubSource(client)


class TestOrganization:
    """Tests for member and repository listings."""

    def test_members(self, client: MagicMock, source: GithubSource) -> None:
        """Test listing organization members."""
        client.get_organization.return_value.get_members.return_value = [_user("alice")]

        assert list(source.list_org_members("org")) == [{"login": "alice"}]
        client.get_organization.assert_called_with("org")

    def test_repos(self, client: MagicMock, source: GithubSource) -> None:
        """Test listing organization repositories."""
        client.get_organization.return_value.get_repos.return_value = [
            SimpleNamespace(full_name="org/r1")
        ]

        assert list(source.list_org_repos("org")) == [{"full_name": "org/r1"}]

    def test_user_email(self, client: MagicMock, source: GithubSource) -> None:
        """Test looking up a member's email."""
        client.get_user.return_value.email = "a@x"

        assert source.user_email("alice") == "a@x"
        client.get_user.assert_called_with("alice")


class TestSignals:
    """Tests for the activity listings."""

    def test_commit_records(self, client: MagicMock, source: GithubSource) -> None:
        """Test the commit record shape, with and without a linked account."""
        when = datetime(2020, 9, 1, tzinfo=UTC)
        git_author = SimpleNamespace(name="Alice", email="a@x", date=when)
        client.get_repo.return_value.get_commits.return_value = [
            SimpleNamespace(sha="abc", author=_user("alice"), commit=SimpleNamespace(author=git_author)),
            SimpleNamespace(sha="def", author=None, commit=SimpleNamespace(author=git_author)),
        ]

        records = list(source.commits_since("org/r1", date(2020, 8, 4)))

        assert records[0]["author"] == {"login": "alice"}
        assert records[1]["author"] is None
        assert records[1]["commit"]["author"] == {"name": "Alice", "email": "a@x", "date": when}
        client.get_repo.assert_called_with("org/r1", lazy=True)
        client.get_repo.return_value.get_commits.assert_called_with(
            since=datetime(2020, 8, 4, tzinfo=UTC)
        )

    def test_issue_records(self, client: MagicMock, source: GithubSource) -> None:
        """Test the issue record shape and listing arguments."""
        when = datetime(2020, 9, 1, tzinfo=UTC)
        client.get_repo.return_value.get_issues.return_value = [
            SimpleNamespace(user=_user("bob"), created_at=when),
            SimpleNamespace(user=None, created_at=when),
        ]

        records = list(source.issues_since("org/r1", date(2020, 8, 4)))

        assert records == [
            {"user": {"login": "bob"}, "created_at": when},
            {"user": None, "created_at": when},
        ]
        client.get_repo.return_value.get_issues.assert_called_with(
            state="all", since=datetime(2020, 8, 4, tzinfo=UTC)
        )

    def test_comment_records(self, client: MagicMock, source: GithubSource) -> None:
        """Test issue comment and review comment records."""
        repo = client.get_repo.return_value
        repo.get_issues_comments.return_value = [SimpleNamespace(user=_user("carol"), created_at=None)]
        repo.get_pulls_review_comments.return_value = [
            SimpleNamespace(user=_user("dave"), created_at=None)
        ]

        assert [r["user"]["login"] for r in source.issue_comments_since("org/r1", date(2020, 8, 4))] == [
            "carol"
        ]
        assert [r["user"]["login"] for r in source.pr_comments_since("org/r1", date(2020, 8, 4))] == [
            "dave"
        ]

    def test_404_becomes_not_found(self, client: MagicMock, source: GithubSource) -> None:
        """Test that a 404 is raised as SourceNotFound."""
        client.get_repo.return_value.get_issues.return_value = _failing(404)

        with pytest.raises(SourceNotFound) as excinfo:
            list(source.issues_since("org/fork", date(2020, 8, 4)))

        assert excinfo.value.repository == "org/fork"

    def test_409_becomes_conflict(self, client: MagicMock, source: GithubSource) -> None:
        """Test that a 409 is raised as SourceConflict."""
        client.get_repo.return_value.get_commits.return_value = _failing(409)

        with pytest.raises(SourceConflict):
            list(source.commits_since("org/empty", date(2020, 8, 4)))

    def test_other_errors_propagate(self, client: MagicMock, source: GithubSource) -> None:
        """Test that other API errors are re-raised unchanged."""
        client.get_repo.return_value.get_commits.return_value = _failing(403)

        with pytest.raises(GithubException):
            list(source.commits_since("org/r1", date(2020, 8, 4)))

    def test_listing_is_lazy(self, client: MagicMock, source: GithubSource) -> None:
        """Test that no page is requested until iteration."""
        source.commits_since("org/r1", date(2020, 8, 4))

        client.get_repo.return_value.get_commits.assert_not_called()


class TestDiagnostics:
    """Tests for check-mode helpers."""

    def test_rate_limit(self, client: MagicMock, source: GithubSource) -> None:
        """Test reading the rate limit from the client."""
        client.rate_limiting = (4000, 5000)

        assert source.rate_limit() == (4000, 5000)

    def test_scopes_trigger_a_request_when_unknown(
        self, client: MagicMock, source: GithubSource
    ) -> None:
        """Test that scopes are fetched when no response has been seen yet."""
        client.oauth_scopes = None

        def authenticate():
            client.oauth_scopes = ["repo", "read:org"]
            return SimpleNamespace(login="admin")

        client.get_user.side_effect = authenticate

        assert source.scopes() == ["repo", "read:org"]

    def test_protocol(self, source: GithubSource) -> None:
        """Test that GithubSource satisfies ActivitySource."""
        assert isinstance(source, ActivitySource)


def test_from_settings_custom_endpoint() -> None:
    """Test building a client for a custom API endpoint."""
    source = GithubSource.from_settings(
        TransportSettings(token="t", base_url="https://ghe.example.com/api/v3")
    )

    assert isinstance(source, GithubSource)


def test_since_datetime() -> None:
    """Test converting the cutoff to an aware datetime."""
    assert since_datetime(date(2020, 8, 4)) == datetime(2020, 8, 4, tzinfo=UTC)
    assert since_datetime(datetime(2020, 8, 4, 6)) == datetime(2020, 8, 4, 6, tzinfo=UTC)
