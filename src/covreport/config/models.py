"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (COVREPORT__SECTION__KEY)
3. Repo YAML (.covreport.yaml)
4. Global YAML (~/.config/covreport/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    COVREPORT__<SECTION>__<KEY>=<VALUE>

Examples:
    COVREPORT__LOGGING__LEVEL=DEBUG
    COVREPORT__REPORT__GROUP_BY=functions
    COVREPORT__UPLOAD__TIMEOUT_SEC=60
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

COVERALLS_ENDPOINT = "https://coveralls.io/api/v1/jobs"


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVREPORT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Reports are printed separately, logs are diagnostics.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ReportConfig(BaseModel):
    """Coverage summary printing.

    Env vars:
        COVREPORT__REPORT__GROUP_BY: Group summary lines by filename or functions
        COVREPORT__REPORT__BY: Tally granularity (line or expression)
        COVREPORT__REPORT__MAX_GROUPS: Print at most this many group lines
    """

    group_by: Literal["filename", "functions"] = "filename"
    by: Literal["line", "expression"] = "line"
    green_threshold: float = Field(
        default=90.0,
        description="Percentages at or above this render green.",
    )
    yellow_threshold: float = Field(
        default=75.0,
        description="Percentages at or above this (and below green) render yellow.",
    )
    max_groups: int | None = Field(
        default=None,
        description="Output budget: lowest-coverage groups are printed first. None = all.",
    )

    @field_validator("green_threshold", "yellow_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not (0.0 <= v <= 100.0):
            raise ValueError(f"Threshold must be 0-100, got {v}")
        return v

    @field_validator("max_groups")
    @classmethod
    def validate_max_groups(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"max_groups must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "ReportConfig":
        if self.yellow_threshold > self.green_threshold:
            raise ValueError("yellow_threshold must not exceed green_threshold")
        return self


class MarkersConfig(BaseModel):
    """Zero-coverage marker handoff.

    Env vars:
        COVREPORT__MARKERS__ENABLED: Allow handing zero-coverage rows to a marker sink
    """

    enabled: bool = Field(
        default=True,
        description="When false, zero_coverage always returns rows even if a sink is available.",
    )


class UploadConfig(BaseModel):
    """Coverage service upload.

    Env vars:
        COVREPORT__UPLOAD__ENDPOINT: Job submission URL
        COVREPORT__UPLOAD__TIMEOUT_SEC: HTTP timeout for the single POST
        COVREPORT__UPLOAD__REPO_TOKEN: Repo token for job submissions
    """

    endpoint: str = Field(default=COVERALLS_ENDPOINT)
    timeout_sec: float = Field(default=30.0)
    repo_token: str | None = Field(
        default=None,
        description="Supplying a token switches to a job submission carrying git metadata.",
    )

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_sec must be positive, got {v}")
        return v


class GitConfig(BaseModel):
    """Git metadata queries.

    Env vars:
        COVREPORT__GIT__TIMEOUT_SEC: Timeout for each git invocation
    """

    timeout_sec: float = Field(default=30.0)


class CovReportConfig(BaseModel):
    """Root configuration for covreport."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    markers: MarkersConfig = Field(default_factory=MarkersConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    git: GitConfig = Field(default_factory=GitConfig)
