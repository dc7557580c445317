# src/member_audit/config.py
"""Run configuration and transport settings.

The CLI turns operator options into an AuditConfig before any network
activity happens, so a bad date or range fails fast without spending API
budget.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

from dateutil import parser as dtparse
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from member_audit.models import RunRange
from member_audit.utils.constants import (
    API_URL_ENV_VARS,
    DEFAULT_API_URL,
    TOKEN_ENV_VARS,
)


class ConfigurationError(ValueError):
    """Missing or invalid options or environment."""


class RangeError(ConfigurationError):
    """The requested repository rows do not exist in the organization."""


def parse_cutoff_date(v: Any) -> date:
    """Parse a calendar date such as "2020-08-04" or "Aug 4 2020"."""
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str) and v.strip():
        try:
            return dtparse.parse(v.strip()).date()
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Cannot parse date: {v!r}") from e
    raise ValueError(f"Cannot parse date: {v!r}")


class AuditConfig(BaseModel):
    """Options for one scan run.

    Attributes:
        organization: Organization login to audit
        since: Cutoff date; activity on or after it counts
        start: First repository row to scan (1-based, inclusive)
        finish: Last repository row to scan (1-based, inclusive)
        fetch_email: Resolve each member's email (one API call per member)
        output_dir: Directory receiving every CSV artifact
        verbose: Debug logging
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    organization: str = Field(..., min_length=1)
    since: date
    start: int = Field(..., ge=1)
    finish: int = Field(..., ge=1)
    fetch_email: bool = False
    output_dir: Path = Field(default_factory=Path.cwd)
    verbose: bool = False

    @field_validator("since", mode="before")
    @classmethod
    def _parse_since(cls, v: Any) -> date:
        return parse_cutoff_date(v)

    @model_validator(mode="after")
    def _check_rows(self) -> AuditConfig:
        if self.start > self.finish:
            raise ValueError(f"start row {self.start} is after finish row {self.finish}")
        return self

    @classmethod
    def from_options(cls, **options: Any) -> AuditConfig:
        """Validate raw options, raising ConfigurationError on failure."""
        missing = [
            name
            for name in ("organization", "since", "start", "finish")
            if options.get(name) in (None, "")
        ]
        if missing:
            raise ConfigurationError(f"Missing required option(s): {', '.join(missing)}")
        values = {k: v for k, v in options.items() if v is not None}
        try:
            return cls.model_validate(values)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(details) from e

    @property
    def run_range(self) -> RunRange:
        return RunRange.from_rows(self.start, self.finish)


class TransportSettings(BaseModel):
    """Credentials and endpoint for the GitHub API."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1, repr=False)
    base_url: str = DEFAULT_API_URL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TransportSettings:
        env = os.environ if environ is None else environ
        token = next((env[k] for k in TOKEN_ENV_VARS if env.get(k)), None)
        if not token:
            raise ConfigurationError(
                f"No API token found; set one of: {', '.join(TOKEN_ENV_VARS)}"
            )
        base_url = next((env[k] for k in API_URL_ENV_VARS if env.get(k)), DEFAULT_API_URL)
        return cls(token=token, base_url=base_url.rstrip("/"))
