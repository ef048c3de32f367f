"""Threshold-colored coverage summary for the terminal.

Output for one report::

    mypkg Line Coverage: 81.25%
    R/slow.R: 40.00%
    R/fast.R: 100.00%

Groups are listed lowest coverage first, ties broken by name. A collection
prints each member in turn with one blank line between members.
"""

from rich.console import Console
from rich.text import Text

from covreport.core.console import get_console, pluralize
from covreport.coverage.models import (
    AnyReport,
    CoverageReport,
    Granularity,
    GroupBy,
    iter_reports,
)
from covreport.coverage.tally import group_percentages, percent, tally

TOP_LEVEL_LABEL = "(top level)"

GREEN_THRESHOLD = 90.0
YELLOW_THRESHOLD = 75.0


def percentage_style(
    value: float,
    *,
    green: float = GREEN_THRESHOLD,
    yellow: float = YELLOW_THRESHOLD,
) -> str:
    if value >= green:
        return "green"
    if value >= yellow:
        return "yellow"
    return "red"


def format_percentage(
    value: float,
    *,
    green: float = GREEN_THRESHOLD,
    yellow: float = YELLOW_THRESHOLD,
) -> Text:
    """Two-decimal percentage colored by threshold (e.g. ``87.50%`` in yellow)."""
    return Text(f"{value:.2f}%", style=percentage_style(value, green=green, yellow=yellow))


def _header(report: CoverageReport) -> str:
    parts = [report.package]
    if report.type_title:
        parts.append(report.type_title)
    parts.append("Coverage: ")
    return " ".join(parts)


def sorted_groups(percents: dict[str | None, float]) -> list[tuple[str, float]]:
    """Label groups and order them by (percentage, name) ascending."""
    labelled = [
        (TOP_LEVEL_LABEL if name is None else name, value) for name, value in percents.items()
    ]
    return sorted(labelled, key=lambda item: (item[1], item[0]))


def render_lines(
    report: CoverageReport,
    *,
    group_by: GroupBy | str = GroupBy.FILENAME,
    by: Granularity | str = Granularity.LINE,
    max_groups: int | None = None,
    green: float = GREEN_THRESHOLD,
    yellow: float = YELLOW_THRESHOLD,
) -> list[Text]:
    """Build the summary lines for one report (empty when nothing was tallied)."""
    tallies = tally(report.records, by=by)
    if not tallies:
        return []

    overall = percent(tallies)
    groups = sorted_groups(group_percentages(tallies, group_by))

    lines = [
        Text.assemble(
            (_header(report), "bold"),
            format_percentage(overall, green=green, yellow=yellow),
        )
    ]

    shown = groups if max_groups is None else groups[:max_groups]
    for name, value in shown:
        lines.append(
            Text.assemble(
                (f"{name}: ", "bold"),
                format_percentage(value, green=green, yellow=yellow),
            )
        )

    hidden = len(groups) - len(shown)
    if hidden > 0:
        lines.append(Text(f"... {pluralize(hidden, 'more group')}", style="dim"))

    return lines


def render(
    report: AnyReport,
    *,
    group_by: GroupBy | str = GroupBy.FILENAME,
    by: Granularity | str = Granularity.LINE,
    max_groups: int | None = None,
    green: float = GREEN_THRESHOLD,
    yellow: float = YELLOW_THRESHOLD,
    console: Console | None = None,
) -> None:
    """Print a coverage summary for a report or collection of reports.

    Args:
        report: A single report or a collection.
        group_by: ``"filename"`` or ``"functions"``.
        by: Tally granularity, ``"line"`` or ``"expression"``.
        max_groups: Print at most this many group lines per report.
        green: Percentages at or above render green.
        yellow: Percentages at or above (below ``green``) render yellow.
        console: Target console; defaults to the shared stderr console.
    """
    console = console or get_console()

    blocks = [
        render_lines(
            member,
            group_by=group_by,
            by=by,
            max_groups=max_groups,
            green=green,
            yellow=yellow,
        )
        for member in iter_reports(report)
    ]

    # One blank line between reports that printed something
    for i, lines in enumerate(block for block in blocks if block):
        if i != 0:
            console.print()
        for line in lines:
            console.print(line, highlight=False, soft_wrap=True)
