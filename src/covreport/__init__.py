"""covreport - coverage summaries and coverage-service uploads from trace records."""

__version__ = "0.1.0"
