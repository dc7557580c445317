# src/member_audit/scanners/__init__.py
"""Activity signal scanners.

Each scanner covers one category of qualifying activity:
- commits: commits on the default branch
- issues: issues opened
- issue comments / pull request comments: comments by members
"""

from member_audit.scanners.base import BaseScanner
from member_audit.scanners.commits import CommitScanner
from member_audit.scanners.issues import (
    IssueCommentScanner,
    IssueScanner,
    PullRequestCommentScanner,
)


# Order in which the engine runs them for each repository
DEFAULT_SCANNERS: tuple[BaseScanner, ...] = (
    CommitScanner(),
    IssueScanner(),
    IssueCommentScanner(),
    PullRequestCommentScanner(),
)

__all__ = [
    "DEFAULT_SCANNERS",
    "BaseScanner",
    "CommitScanner",
    "IssueCommentScanner",
    "IssueScanner",
    "PullRequestCommentScanner",
]
