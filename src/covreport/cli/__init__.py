"""covreport CLI."""
