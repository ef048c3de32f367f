"""covreport error types with typed error codes.

Error code ranges:
- 1xxx: Tally
- 2xxx: Config
- 3xxx: CI / git metadata
- 4xxx: Upload
- 5xxx: Source files
- 6xxx: Trace input
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Tally (1xxx)
    TALLY_EMPTY_INPUT = 1001

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # CI / git (3xxx)
    GIT_MALFORMED_INFO = 3001
    GIT_COMMAND_FAILED = 3002
    CI_UNKNOWN_PROVIDER = 3101

    # Upload (4xxx)
    UPLOAD_HTTP_STATUS = 4001
    UPLOAD_TRANSPORT = 4002

    # Source (5xxx)
    SOURCE_UNREADABLE = 5001
    SOURCE_LINE_OUT_OF_RANGE = 5002

    # Trace input (6xxx)
    TRACE_UNREADABLE = 6001
    TRACE_INVALID = 6002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class CovReportError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'UPLOAD_HTTP_STATUS')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class EmptyInputError(CovReportError):
    """Percentage requested over zero tallies."""

    @classmethod
    def no_tallies(cls, what: str = "coverage") -> "EmptyInputError":
        return cls(
            code=ErrorCode.TALLY_EMPTY_INPUT,
            message=f"Cannot compute {what} percentage of zero tallies",
            details={"what": what},
        )


class ConfigError(CovReportError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class MalformedGitInfoError(CovReportError):
    """Git metadata query returned unusable output."""

    @classmethod
    def wrong_field_count(cls, output: str, expected: int, got: int) -> "MalformedGitInfoError":
        return cls(
            code=ErrorCode.GIT_MALFORMED_INFO,
            message=f"Expected {expected} git head fields, got {got}",
            details={"output": output, "expected": expected, "got": got},
        )

    @classmethod
    def command_failed(cls, args: list[str], reason: str) -> "MalformedGitInfoError":
        return cls(
            code=ErrorCode.GIT_COMMAND_FAILED,
            message=f"git command failed ({' '.join(args)}): {reason}",
            details={"args": args, "reason": reason},
        )


class UnknownProviderError(CovReportError):
    """Upload attempted with no CI provider and no repo token."""

    @classmethod
    def no_target(cls) -> "UnknownProviderError":
        return cls(
            code=ErrorCode.CI_UNKNOWN_PROVIDER,
            message="No CI provider detected and no repo token supplied",
        )


class UploadError(CovReportError):
    """Submission to the coverage service failed."""

    @classmethod
    def bad_status(cls, url: str, status_code: int, body: str) -> "UploadError":
        return cls(
            code=ErrorCode.UPLOAD_HTTP_STATUS,
            message=f"Upload to {url} failed with HTTP {status_code}",
            retryable=status_code >= 500,
            details={"url": url, "status_code": status_code, "body": body},
        )

    @classmethod
    def transport(cls, url: str, reason: str) -> "UploadError":
        return cls(
            code=ErrorCode.UPLOAD_TRANSPORT,
            message=f"Upload to {url} failed: {reason}",
            retryable=True,
            details={"url": url, "reason": reason},
        )


class SourceReadError(CovReportError):
    """Source file referenced by a tally cannot be used."""

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "SourceReadError":
        return cls(
            code=ErrorCode.SOURCE_UNREADABLE,
            message=f"Cannot read source file {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def line_out_of_range(cls, path: str, line: int, line_count: int) -> "SourceReadError":
        return cls(
            code=ErrorCode.SOURCE_LINE_OUT_OF_RANGE,
            message=f"Line {line} is past the end of {path} ({line_count} lines)",
            details={"path": path, "line": line, "line_count": line_count},
        )


class TraceLoadError(CovReportError):
    """Trace record input cannot be loaded."""

    @classmethod
    def unreadable(cls, path: str, reason: str) -> "TraceLoadError":
        return cls(
            code=ErrorCode.TRACE_UNREADABLE,
            message=f"Cannot read trace file {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid(cls, path: str, reason: str) -> "TraceLoadError":
        return cls(
            code=ErrorCode.TRACE_INVALID,
            message=f"Invalid trace file {path}: {reason}",
            details={"path": path, "reason": reason},
        )
