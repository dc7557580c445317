# src/member_audit/utils/__init__.py
"""Utility modules for member activity auditing."""

from member_audit.utils.constants import (
    ACTIVE_REPORT_TEMPLATE,
    MEMBERS_SNAPSHOT_FILE,
    REPOSITORIES_SNAPSHOT_FILE,
    REQUIRED_SCOPES,
    UNRECOGNIZED_AUTHORS_FILE,
)

__all__ = [
    "ACTIVE_REPORT_TEMPLATE",
    "MEMBERS_SNAPSHOT_FILE",
    "REPOSITORIES_SNAPSHOT_FILE",
    "REQUIRED_SCOPES",
    "UNRECOGNIZED_AUTHORS_FILE",
]
