# tests/conftest.py
"""Pytest configuration and fixtures for member-audit tests."""

from __future__ import annotations

import logging
from datetime import date

import pytest
from helpers import FakeSource, commit_record, user_record

from member_audit.transport import SourceConflict, SourceNotFound


@pytest.fixture
def cutoff() -> date:
    return date(2020, 8, 4)


@pytest.fixture
def not_found() -> SourceNotFound:
    return SourceNotFound("org/private-fork")


@pytest.fixture
def conflict() -> SourceConflict:
    return SourceConflict("org/empty")


@pytest.fixture
def sample_source() -> FakeSource:
    """Three repositories with activity spread over every signal."""
    return FakeSource(
        members=["alice", "bob", "carol", "dave"],
        repositories=["org/r1", "org/r2", "org/r3"],
        signals={
            ("commits_since", "org/r1"): [
                commit_record("alice"),
                commit_record(None, name="ghost", email="g@x"),
                commit_record("outsider"),
            ],
            ("issues_since", "org/r1"): [user_record(None)],
            ("issue_comments_since", "org/r2"): [user_record("bob"), user_record("alice")],
            ("commits_since", "org/r2"): SourceConflict("org/r2"),
            ("pr_comments_since", "org/r3"): [user_record("carol")],
            ("issues_since", "org/r3"): SourceNotFound("org/r3"),
        },
    )


@pytest.fixture(autouse=True)
def reset_loggers():
    """Undo handlers and levels installed by the CLI."""
    yield
    for name in ("member_audit", "github"):
        log = logging.getLogger(name)
        log.handlers.clear()
        log.setLevel(logging.NOTSET)
        log.propagate = True


# ============================================================
# Markers Configuration
# ============================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that run the whole pipeline end to end",
    )
