"""Tests for config/models.py module.

Covers:
- LogOutputConfig model
- LoggingConfig model
- ReportConfig model
- UploadConfig model
- CovReportConfig root model
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from covreport.config.models import (
    COVERALLS_ENDPOINT,
    CovReportConfig,
    GitConfig,
    LoggingConfig,
    LogOutputConfig,
    MarkersConfig,
    ReportConfig,
    UploadConfig,
)


class TestLogOutputConfig:
    """Tests for LogOutputConfig model."""

    def test_defaults(self) -> None:
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    def test_absolute_file_destination(self, tmp_path) -> None:
        path = str(tmp_path / "covreport.log")
        assert LogOutputConfig(destination=path).destination == path

    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/covreport.log")


class TestLoggingConfig:
    def test_defaults(self) -> None:
        config = LoggingConfig()
        assert config.level == "WARNING"
        assert len(config.outputs) == 1

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="VERBOSE")  # type: ignore[arg-type]


class TestReportConfig:
    """Tests for ReportConfig model."""

    def test_defaults(self) -> None:
        config = ReportConfig()
        assert config.group_by == "filename"
        assert config.by == "line"
        assert config.green_threshold == 90.0
        assert config.yellow_threshold == 75.0
        assert config.max_groups is None

    def test_invalid_group_by(self) -> None:
        with pytest.raises(ValidationError):
            ReportConfig(group_by="package")  # type: ignore[arg-type]

    @pytest.mark.parametrize("value", [-1.0, 100.5])
    def test_threshold_out_of_range(self, value: float) -> None:
        with pytest.raises(ValidationError):
            ReportConfig(green_threshold=value)

    def test_yellow_above_green_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ReportConfig(green_threshold=60.0, yellow_threshold=80.0)

    def test_max_groups_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ReportConfig(max_groups=0)


class TestUploadConfig:
    def test_defaults(self) -> None:
        config = UploadConfig()
        assert config.endpoint == COVERALLS_ENDPOINT
        assert config.timeout_sec == 30.0
        assert config.repo_token is None

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            UploadConfig(timeout_sec=0)


class TestCovReportConfig:
    def test_all_sections_present(self) -> None:
        config = CovReportConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.report, ReportConfig)
        assert isinstance(config.markers, MarkersConfig)
        assert isinstance(config.upload, UploadConfig)
        assert isinstance(config.git, GitConfig)
        assert config.markers.enabled is True
