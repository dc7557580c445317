# tests/test_reconcile.py
"""Tests for cross-run reconciliation."""

from __future__ import annotations

from pathlib import Path

import pytest

from member_audit.reconcile import (
    find_inactive_logins,
    missing_rows,
    plan_ranges,
    reconcile_reports,
    write_inactive_report,
)


class TestFindInactiveLogins:
    """Tests for the set difference."""

    def test_roster_minus_union(self) -> None:
        """Test that inactive members are absent from every active set."""
        inactive = find_inactive_logins(
            ["alice", "bob", "carol", "dave"],
            [{"alice"}, set(), {"carol", "outsider"}],
        )

        assert inactive == ["bob", "dave"]

    def test_no_reports_means_everyone_inactive(self) -> None:
        """Test that no active sets leaves the whole roster inactive."""
        assert find_inactive_logins(["alice", "bob"], []) == ["alice", "bob"]


class TestReconcileReports:
    """Tests for reconcile_reports."""

    def test_from_csv_files(self, tmp_path: Path) -> None:
        """Test reconciling a snapshot with two partition reports."""
        members = tmp_path / "all_members.csv"
        members.write_text("login,email\nalice,a@x\nbob,b@x\ncarol,\n")
        first = tmp_path / "active_users_for_repos-0-to-9.csv"
        first.write_text("login,email\nalice,a@x\n")
        second = tmp_path / "active_users_for_repos-10-to-19.csv"
        second.write_text("login,email\n")

        df = reconcile_reports(members, [first, second])

        assert df["login"].to_list() == ["bob", "carol"]
        assert df["email"].to_list() == ["b@x", None]

        path = write_inactive_report(df, tmp_path / "out")
        assert path.read_text().splitlines() == ["login,email", "bob,b@x", "carol,"]

    def test_requires_reports(self, tmp_path: Path) -> None:
        """Test that at least one report is required."""
        members = tmp_path / "all_members.csv"
        members.write_text("login,email\nalice,\n")

        with pytest.raises(ValueError, match="At least one"):
            reconcile_reports(members, [])


class TestPlanRanges:
    """Tests for range planning."""

    def test_covers_every_row(self) -> None:
        """Test that planned ranges are disjoint and cover every row."""
        ranges = plan_ranges(245, 30)

        assert ranges[0] == (1, 30)
        assert ranges[-1] == (241, 245)
        assert missing_rows(ranges, 245) == []

    def test_empty_organization(self) -> None:
        """Test planning for an organization without repositories."""
        assert plan_ranges(0, 30) == []

    def test_invalid_size(self) -> None:
        """Test that a non-positive size is rejected."""
        with pytest.raises(ValueError):
            plan_ranges(10, 0)

    def test_missing_rows(self) -> None:
        """Test finding rows that no range covers."""
        assert missing_rows([(1, 3), (6, 7)], 8) == [4, 5, 8]
