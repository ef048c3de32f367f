"""Fixtures for coverage tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from covreport.coverage.models import CoverageRecord, CoverageReport

RecordFactory = Callable[..., CoverageRecord]


def _record(
    filename: str = "R/a.R",
    functions: str | None = "f",
    line: int = 1,
    value: int = 1,
    *,
    first_column: int = 1,
    last_column: int = 10,
    last_line: int | None = None,
) -> CoverageRecord:
    """Build a record, defaulting the span to a single line."""
    return CoverageRecord(
        filename=filename,
        functions=functions,
        first_line=line,
        last_line=last_line if last_line is not None else line,
        first_column=first_column,
        last_column=last_column,
        value=value,
    )


@pytest.fixture
def make_record() -> RecordFactory:
    """Factory for single-line records."""
    return _record


@pytest.fixture
def mixed_report() -> CoverageReport:
    """Two files, one top-level line, one line with two expressions."""
    return CoverageReport(
        package="mypkg",
        type="line",
        records=[
            _record("R/a.R", "f", 1, 3),
            _record("R/a.R", "f", 2, 0, first_column=1, last_column=4),
            _record("R/a.R", "f", 2, 5, first_column=6, last_column=9),
            _record("R/a.R", None, 4, 0),
            _record("R/b.R", "g", 1, 0),
            _record("R/b.R", "g", 2, 1),
        ],
    )
