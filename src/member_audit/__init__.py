# src/member_audit/__init__.py
"""GitHub Organization Member Activity Audit.

Finds which organization members committed, opened issues or commented
since a cutoff date, one bounded range of repositories at a time. Partition
reports from several runs are reconciled into an inactive-members list.
"""

from member_audit.config import AuditConfig, ConfigurationError, RangeError
from member_audit.engine import ActivityClassifier, classify
from member_audit.models import (
    ActivityEvent,
    ClassificationResult,
    Member,
    Roster,
    RunRange,
    SignalKind,
    UnrecognizedAuthor,
)
from member_audit.reconcile import find_inactive_logins, reconcile_reports
from member_audit.runner import run_audit, run_check


__version__ = "0.1.0"

__all__ = [
    "ActivityClassifier",
    "ActivityEvent",
    "AuditConfig",
    "ClassificationResult",
    "ConfigurationError",
    "Member",
    "RangeError",
    "Roster",
    "RunRange",
    "SignalKind",
    "UnrecognizedAuthor",
    "__version__",
    "classify",
    "find_inactive_logins",
    "reconcile_reports",
    "run_audit",
    "run_check",
]
