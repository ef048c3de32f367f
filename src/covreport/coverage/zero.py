"""Locate tallies with zero hits.

Without a marker sink the zero rows are returned for inspection. With an
available sink (an editor integration showing source markers) one warning
marker per zero row is handed to the sink instead and the report is
returned unchanged.
"""

import json
from pathlib import Path
from typing import Protocol

from covreport.core.logging import get_logger
from covreport.coverage.models import (
    AnyReport,
    CoverageRecord,
    CoverageReport,
    Granularity,
    Marker,
    Tally,
    iter_reports,
)
from covreport.coverage.tally import tally

log = get_logger("zero")

SINK_NAME = "covreport"


class MarkerSink(Protocol):
    """Editor integration that displays source markers."""

    def available(self) -> bool:
        """Whether the integration is reachable right now."""
        ...

    def show(self, name: str, markers: list[Marker]) -> None:
        """Display markers under a source name."""
        ...


class MarkerFileSink:
    """Writes markers as JSON for editors that load problem lists from disk."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.written = 0

    def available(self) -> bool:
        return self.path.parent.is_dir()

    def show(self, name: str, markers: list[Marker]) -> None:
        data = {"name": name, "markers": [m.as_dict() for m in markers]}
        self.path.write_text(json.dumps(data, indent=2) + "\n")
        self.written = len(markers)


def zero_rows(report: CoverageReport, by: Granularity | str = Granularity.LINE) -> list[Tally]:
    """Tallies of a single report whose value is zero."""
    return [t for t in tally(report.records, by=by) if t.value == 0]


def _marker_message(report: CoverageReport) -> str:
    if report.type_title:
        return f"No {report.type_title} Coverage!"
    return "No Coverage!"


def build_markers(report: AnyReport, by: Granularity | str = Granularity.LINE) -> list[Marker]:
    """One marker per zero-value tally, sorted by (file, line, message)."""
    markers: list[Marker] = []
    for member in iter_reports(report):
        message = _marker_message(member)
        for row in zero_rows(member, by=by):
            column = row.first_column if isinstance(row, CoverageRecord) else 1
            markers.append(
                Marker(file=row.filename, line=row.first_line, column=column, message=message)
            )

    markers.sort(key=lambda m: (m.file, m.line, m.message))
    return markers


def zero_coverage(
    report: AnyReport,
    by: Granularity | str = Granularity.LINE,
    *,
    sink: MarkerSink | None = None,
    use_markers: bool = True,
) -> list[Tally] | AnyReport:
    """Find zero-coverage locations.

    Args:
        report: A report or a collection of reports.
        by: Tally granularity. Expression rows keep their position columns,
            line rows do not.
        sink: Optional marker sink.
        use_markers: When False the sink is ignored.

    Returns:
        The zero rows, or ``report`` itself when markers were handed to the sink.
    """
    if use_markers and sink is not None and sink.available():
        markers = build_markers(report, by=by)
        sink.show(SINK_NAME, markers)
        log.info("markers_sent", count=len(markers))
        return report

    rows: list[Tally] = []
    for member in iter_reports(report):
        rows.extend(zero_rows(member, by=by))
    return rows
