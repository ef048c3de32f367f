"""Config module exports."""

from covreport.config.loader import CovReportSettings, load_config
from covreport.config.models import (
    CovReportConfig,
    GitConfig,
    LoggingConfig,
    MarkersConfig,
    ReportConfig,
    UploadConfig,
)

__all__ = [
    "load_config",
    "CovReportConfig",
    "CovReportSettings",
    "GitConfig",
    "LoggingConfig",
    "MarkersConfig",
    "ReportConfig",
    "UploadConfig",
]
