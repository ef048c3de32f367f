"""Tally trace records by line or expression and compute coverage percentages.

Line tallies sum every record sharing ``(filename, functions, first_line)``.
Records with no enclosing function (``functions is None``) form their own
group per line; they are never dropped.
"""

from collections.abc import Callable, Iterable, Sequence

from covreport.core.errors import EmptyInputError
from covreport.core.logging import get_logger
from covreport.coverage.models import (
    CoverageRecord,
    Granularity,
    GroupBy,
    LineTally,
    Tally,
)

log = get_logger("tally")

_LineKey = tuple[str, str | None, int]


def tally_lines(records: Iterable[CoverageRecord]) -> list[LineTally]:
    """Sum record values per (filename, functions, first_line).

    Output order follows the first appearance of each key in the input.
    """
    sums: dict[_LineKey, int] = {}
    for record in records:
        key = (record.filename, record.functions, record.first_line)
        sums[key] = sums.get(key, 0) + record.value

    return [
        LineTally(filename=filename, functions=functions, first_line=first_line, value=value)
        for (filename, functions, first_line), value in sums.items()
    ]


def tally(
    records: Sequence[CoverageRecord],
    by: Granularity | str = Granularity.LINE,
) -> list[Tally]:
    """Aggregate records at the requested granularity.

    Args:
        records: Raw trace records.
        by: ``"line"`` to sum per line, ``"expression"`` to pass records through.

    Returns:
        Tallies; at expression granularity the input rows in input order.
    """
    granularity = Granularity(by)
    if granularity is Granularity.EXPRESSION:
        return list(records)

    tallies: list[Tally] = list(tally_lines(records))
    log.debug("tally_complete", by=granularity.value, records=len(records), rows=len(tallies))
    return tallies


def percent(tallies: Sequence[Tally]) -> float:
    """Percentage of tallies with at least one hit.

    Raises:
        EmptyInputError: If ``tallies`` is empty.
    """
    if not tallies:
        raise EmptyInputError.no_tallies()
    hits = sum(1 for t in tallies if t.value > 0)
    return 100.0 * hits / len(tallies)


def group_key(group_by: GroupBy | str) -> Callable[[Tally], str | None]:
    """Accessor for the grouping column."""
    column = GroupBy(group_by)
    if column is GroupBy.FILENAME:
        return lambda t: t.filename
    return lambda t: t.functions


def group_percentages(
    tallies: Iterable[Tally],
    group_by: GroupBy | str = GroupBy.FILENAME,
) -> dict[str | None, float]:
    """Coverage percentage of each distinct value of the grouping column.

    Tallies without a function name are grouped under the key ``None``.
    """
    key = group_key(group_by)
    groups: dict[str | None, list[Tally]] = {}
    for t in tallies:
        groups.setdefault(key(t), []).append(t)

    return {name: percent(members) for name, members in groups.items()}
