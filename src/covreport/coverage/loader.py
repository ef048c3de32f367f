"""Load trace records produced by an instrumentation run.

Accepted JSON shapes:

    {"package": "mypkg", "type": "line", "records": [
        {"filename": "R/a.R", "functions": "f", "first_line": 3, "last_line": 3,
         "first_column": 5, "last_column": 9, "value": 2},
        ...
    ]}

or a list of such objects, which loads as a CoverageCollection.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from covreport.core.errors import TraceLoadError
from covreport.core.logging import get_logger
from covreport.coverage.models import (
    AnyReport,
    CoverageCollection,
    CoverageRecord,
    CoverageReport,
)

log = get_logger("loader")


class _RecordModel(BaseModel):
    filename: str
    functions: str | None = None
    first_line: int = Field(ge=1)
    last_line: int = Field(ge=1)
    first_column: int = Field(ge=1)
    last_column: int = Field(ge=1)
    value: int = Field(ge=0)


class _ReportModel(BaseModel):
    package: str
    type: str | None = None
    records: list[_RecordModel] = Field(default_factory=list)

    def to_report(self) -> CoverageReport:
        return CoverageReport(
            package=self.package,
            type=self.type,
            records=[CoverageRecord(**r.model_dump()) for r in self.records],
        )


def parse_trace(data: Any, *, source: str = "<data>") -> AnyReport:
    """Validate decoded JSON into a report or collection.

    Raises:
        TraceLoadError: If the data does not match either shape.
    """
    try:
        if isinstance(data, list):
            return CoverageCollection(
                reports=[_ReportModel.model_validate(item).to_report() for item in data]
            )
        return _ReportModel.model_validate(data).to_report()
    except ValidationError as e:
        err = e.errors()[0]
        where = ".".join(str(loc) for loc in err["loc"])
        raise TraceLoadError.invalid(source, f"{where}: {err['msg']}") from e


def load_trace(path: Path) -> AnyReport:
    """Read a trace JSON file.

    Raises:
        TraceLoadError: If the file cannot be read, decoded or validated.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TraceLoadError.unreadable(str(path), str(e)) from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise TraceLoadError.invalid(str(path), str(e)) from e

    report = parse_trace(data, source=str(path))
    log.debug("trace_loaded", path=str(path), kind=type(report).__name__)
    return report
