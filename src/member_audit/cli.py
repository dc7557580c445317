# src/member_audit/cli.py
"""Command line interface.

Usage:
    member-audit scan -o github -d "Aug 4 2020" -s 1 -f 30
    member-audit scan -o github -d 2020-08-04 -s 31 -f 60 --email
    member-audit check
    member-audit plan --total 245 --size 30
    member-audit reconcile --members all_members.csv active_users_for_repos-*.csv

Each scan covers a range of rows of repositories.csv (1-based, inclusive)
and writes active_users_for_repos-{start}-to-{finish}.csv. Run several
scans with disjoint ranges, possibly in parallel, then `reconcile` the
reports against all_members.csv to list inactive members.

Required environment:
    GITHUB_TOKEN (or OCTOKIT_ACCESS_TOKEN): token with org admin privileges
    GITHUB_API_URL (or OCTOKIT_API_ENDPOINT): API endpoint for GitHub
        Enterprise Server (defaults to https://api.github.com)
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

from github import GithubException

from member_audit.config import AuditConfig, ConfigurationError, TransportSettings
from member_audit.loader import read_repositories
from member_audit.reconcile import (
    missing_rows,
    plan_ranges,
    reconcile_reports,
    write_inactive_report,
)
from member_audit.reports import parse_active_report_name
from member_audit.runner import run_audit, run_check
from member_audit.transport import ActivitySource, GithubSource
from member_audit.utils.constants import LOG_FORMAT


logger = logging.getLogger("member_audit")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2

SourceFactory = Callable[[TransportSettings], ActivitySource]


def configure_logging(verbose: bool = False) -> None:
    """Send progress to stderr; reports go to files."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    # PyGithub request and response traces
    github_logger = logging.getLogger("github")
    github_logger.handlers[:] = [handler] if verbose else []
    github_logger.setLevel(logging.DEBUG if verbose else logging.NOTSET)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="member-audit",
        description="Find active and inactive members in an organization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="More output to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Find active members for a range of repositories")
    scan.add_argument("-o", "--organization", help="Organization to scan for inactive users")
    scan.add_argument(
        "-d", "--date", dest="since", help='Date from which to look for activity, e.g. "Aug 4 2020"'
    )
    scan.add_argument("-s", "--start", type=int, help="First repository row (1-based)")
    scan.add_argument("-f", "--finish", type=int, help="Last repository row (1-based, inclusive)")
    scan.add_argument(
        "-e",
        "--email",
        dest="fetch_email",
        action="store_true",
        help="Fetch member emails (one extra API call per member)",
    )
    scan.add_argument(
        "-c", "--check", action="store_true", help="Only check connectivity and scopes"
    )
    scan.add_argument("--output-dir", type=Path, default=Path.cwd(), help="Where to write CSV files")
    scan.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help=argparse.SUPPRESS
    )

    sub.add_parser("check", help="Check connectivity, token scopes and rate limit")

    plan = sub.add_parser("plan", help="Print repository row ranges covering the organization")
    plan.add_argument("--total", type=int, required=True, help="Number of repositories")
    plan.add_argument("--size", type=int, required=True, help="Repositories per range")

    reconcile = sub.add_parser("reconcile", help="List members absent from every active report")
    reconcile.add_argument("--members", type=Path, required=True, help="Path to all_members.csv")
    reconcile.add_argument("reports", nargs="+", type=Path, help="active_users_for_repos-*.csv files")
    reconcile.add_argument(
        "--repositories", type=Path, help="repositories.csv, to warn about rows no report covers"
    )
    reconcile.add_argument("--output-dir", type=Path, default=Path.cwd())

    return parser


def _cmd_scan(args: argparse.Namespace, source_factory: SourceFactory) -> int:
    if args.check:
        return _cmd_check(args, source_factory)
    config = AuditConfig.from_options(
        organization=args.organization,
        since=args.since,
        start=args.start,
        finish=args.finish,
        fetch_email=args.fetch_email,
        output_dir=args.output_dir,
        verbose=args.verbose,
    )
    source = source_factory(TransportSettings.from_env())
    outcome = run_audit(config, source)
    logger.info("Active report written to %s", outcome.artifacts["active"])
    return EXIT_OK


def _cmd_check(args: argparse.Namespace, source_factory: SourceFactory) -> int:
    run_check(source_factory(TransportSettings.from_env()))
    return EXIT_OK


def _cmd_plan(args: argparse.Namespace) -> int:
    try:
        ranges = plan_ranges(args.total, args.size)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    for start, finish in ranges:
        print(f"-s {start} -f {finish}")
    return EXIT_OK


def _cmd_reconcile(args: argparse.Namespace) -> int:
    if args.repositories is not None:
        total = len(read_repositories(args.repositories))
        ranges = [r for r in map(parse_active_report_name, args.reports) if r is not None]
        gaps = missing_rows([(r.start_row + 1, r.finish_row + 1) for r in ranges], total)
        if gaps:
            logger.warning(
                "%d repository rows are not covered by any report (first: %d)", len(gaps), gaps[0]
            )
    inactive = reconcile_reports(args.members, args.reports)
    path = write_inactive_report(inactive, args.output_dir)
    logger.info("%d inactive members written to %s", inactive.height, path)
    return EXIT_OK


def main(
    argv: Sequence[str] | None = None,
    source_factory: SourceFactory = GithubSource.from_settings,
) -> int:
    """Entry point; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(getattr(args, "verbose", False))

    try:
        if args.command == "scan":
            return _cmd_scan(args, source_factory)
        if args.command == "check":
            return _cmd_check(args, source_factory)
        if args.command == "plan":
            return _cmd_plan(args)
        return _cmd_reconcile(args)
    except ConfigurationError as e:
        logger.error("%s", e)
        return EXIT_CONFIG
    except FileNotFoundError as e:
        logger.error("%s", e)
        return EXIT_CONFIG
    except GithubException as e:
        logger.error("GitHub API error (%s): %s", e.status, e.data)
        return EXIT_FAILURE
    except Exception as e:
        logger.error("Run failed: %s: %s", type(e).__name__, e)
        logger.debug("Traceback", exc_info=True)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
