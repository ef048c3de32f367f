"""Tests for trace file loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from covreport.core.errors import ErrorCode, TraceLoadError
from covreport.coverage.loader import load_trace, parse_trace
from covreport.coverage.models import CoverageCollection, CoverageRecord, CoverageReport

RECORD = {
    "filename": "R/a.R",
    "functions": None,
    "first_line": 3,
    "last_line": 4,
    "first_column": 2,
    "last_column": 8,
    "value": 7,
}


class TestParseTrace:
    def test_single_report(self) -> None:
        result = parse_trace({"package": "mypkg", "type": "line", "records": [RECORD]})

        assert isinstance(result, CoverageReport)
        assert result.package == "mypkg"
        assert result.type == "line"
        assert result.records == [CoverageRecord(**RECORD)]

    def test_list_is_collection(self) -> None:
        result = parse_trace([{"package": "a", "records": []}, {"package": "b"}])

        assert isinstance(result, CoverageCollection)
        assert [r.package for r in result] == ["a", "b"]
        assert result.reports[0].type is None

    def test_functions_optional(self) -> None:
        record = {k: v for k, v in RECORD.items() if k != "functions"}

        result = parse_trace({"package": "p", "records": [record]})

        assert isinstance(result, CoverageReport)
        assert result.records[0].functions is None

    def test_negative_value_rejected(self) -> None:
        with pytest.raises(TraceLoadError) as exc_info:
            parse_trace({"package": "p", "records": [{**RECORD, "value": -1}]})

        assert exc_info.value.code == ErrorCode.TRACE_INVALID
        assert "value" in exc_info.value.message

    def test_missing_package_rejected(self) -> None:
        with pytest.raises(TraceLoadError):
            parse_trace({"records": []})


class TestLoadTrace:
    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "trace.json"
        path.write_text(json.dumps({"package": "p", "records": [RECORD]}))

        result = load_trace(path)

        assert isinstance(result, CoverageReport)
        assert len(result) == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(TraceLoadError) as exc_info:
            load_trace(tmp_path / "missing.json")

        assert exc_info.value.code == ErrorCode.TRACE_UNREADABLE

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "trace.json"
        path.write_text("{not json")

        with pytest.raises(TraceLoadError) as exc_info:
            load_trace(path)

        assert exc_info.value.code == ErrorCode.TRACE_INVALID
