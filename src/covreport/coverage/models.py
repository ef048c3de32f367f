"""Trace-record coverage data model.

A run produces one CoverageRecord per executed source span. Records are
aggregated into tallies either per expression (records pass through as-is)
or per line (records sharing filename, function and first line are summed).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class Granularity(str, Enum):
    """Resolution at which records are tallied."""

    LINE = "line"
    EXPRESSION = "expression"


class GroupBy(str, Enum):
    """Column used to group tallies in a printed summary."""

    FILENAME = "filename"
    FUNCTIONS = "functions"


@dataclass(frozen=True, slots=True)
class CoverageRecord:
    """One executed source span with its hit count.

    Positions are 1-based. ``functions`` is None for top-level code.
    """

    filename: str
    functions: str | None
    first_line: int
    last_line: int
    first_column: int
    last_column: int
    value: int

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class LineTally:
    """Summed hits for every record on one (filename, functions, first_line)."""

    filename: str
    functions: str | None
    first_line: int
    value: int

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


Tally = CoverageRecord | LineTally


def to_title(text: str) -> str:
    """Upper-case the first letter of every word, leaving the rest alone."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


@dataclass(slots=True)
class CoverageReport:
    """Trace records for one package, tagged with what was instrumented."""

    package: str
    records: list[CoverageRecord] = field(default_factory=list)
    type: str | None = None  # "line", "function", "none", ...

    @property
    def type_title(self) -> str | None:
        """Display form of the instrumentation type, or None when untyped."""
        if self.type is None or self.type == "none":
            return None
        return to_title(self.type)

    def __len__(self) -> int:
        return len(self.records)


@dataclass(slots=True)
class CoverageCollection:
    """Several reports handled together (printed in turn, markers merged)."""

    reports: list[CoverageReport] = field(default_factory=list)

    def __iter__(self) -> Iterator[CoverageReport]:
        return iter(self.reports)

    def __len__(self) -> int:
        return len(self.reports)


AnyReport = CoverageReport | CoverageCollection


def iter_reports(report: AnyReport) -> Iterator[CoverageReport]:
    """Yield the member reports of a collection, or the report itself."""
    if isinstance(report, CoverageCollection):
        yield from report.reports
    else:
        yield report


@dataclass(frozen=True, slots=True)
class Marker:
    """Editor annotation for one zero-coverage location."""

    file: str
    line: int
    column: int
    message: str
    type: str = "warning"

    def as_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "message": self.message,
        }
