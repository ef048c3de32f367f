"""Coverage aggregation, summaries and zero-coverage lookup.

Usage:
    from covreport.coverage import load_trace, tally, percent, render, zero_coverage

    report = load_trace(Path("trace.json"))

    lines = tally(report.records, by="line")
    print(percent(lines))

    render(report, group_by="functions")
    missed = zero_coverage(report, by="expression")
"""

from covreport.coverage.loader import load_trace, parse_trace
from covreport.coverage.models import (
    AnyReport,
    CoverageCollection,
    CoverageRecord,
    CoverageReport,
    Granularity,
    GroupBy,
    LineTally,
    Marker,
    Tally,
    iter_reports,
)
from covreport.coverage.printer import format_percentage, render, render_lines
from covreport.coverage.tally import group_percentages, percent, tally, tally_lines
from covreport.coverage.zero import (
    MarkerFileSink,
    MarkerSink,
    build_markers,
    zero_coverage,
    zero_rows,
)

__all__ = [
    # Models
    "AnyReport",
    "CoverageCollection",
    "CoverageRecord",
    "CoverageReport",
    "Granularity",
    "GroupBy",
    "LineTally",
    "Marker",
    "Tally",
    "iter_reports",
    # Input
    "load_trace",
    "parse_trace",
    # Tally
    "group_percentages",
    "percent",
    "tally",
    "tally_lines",
    # Printer
    "format_percentage",
    "render",
    "render_lines",
    # Zero coverage
    "MarkerFileSink",
    "MarkerSink",
    "build_markers",
    "zero_coverage",
    "zero_rows",
]
