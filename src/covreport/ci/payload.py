"""Build the coverage-service JSON payload.

Output schema, anonymous CI submission:
{
    "service_name": str,            # lowercased provider name
    "source_files": [
        {"name": str, "source": str, "coverage": [int | null, ...]},
        ...
    ]
}

Job submission (repo token supplied):
{
    "repo_token": str,
    "git": {
        "head": {"id", "author_name", "author_email",
                 "committer_name", "committer_email", "message"},
        "branch": str,
        "remotes": [{"name": str, "url": str}, ...]
    },
    "source_files": [...]
}

``coverage`` has one slot per source line: null when the line was not
measured, otherwise the summed hit count (0 allowed). All scalar fields are
bare JSON scalars.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from covreport.ci.git import CommandRunner, GitInfo, SubprocessRunner, git_info
from covreport.ci.providers import CIMetadata
from covreport.core.errors import SourceReadError, UnknownProviderError
from covreport.core.logging import get_logger
from covreport.coverage.models import AnyReport, LineTally, iter_reports
from covreport.coverage.tally import tally_lines

log = get_logger("payload")


@dataclass(frozen=True, slots=True)
class SourceFile:
    name: str
    source: str
    coverage: list[int | None] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "source": self.source, "coverage": list(self.coverage)}


def split_source_lines(text: str) -> list[str]:
    """Split text into lines; a trailing newline does not start an extra line."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def read_source_lines(path: Path) -> list[str]:
    """Read a whole source file as lines.

    Raises:
        SourceReadError: If the file cannot be read or decoded.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError.unreadable(str(path), str(e)) from e
    return split_source_lines(text)


def line_coverage(name: str, tallies: list[LineTally], line_count: int) -> list[int | None]:
    """Per-line coverage vector for one file.

    Raises:
        SourceReadError: If a tally points past the last line of the file.
    """
    coverage: list[int | None] = [None] * line_count
    for t in tallies:
        if not (1 <= t.first_line <= line_count):
            raise SourceReadError.line_out_of_range(name, t.first_line, line_count)
        index = t.first_line - 1
        # Top-level and function tallies may share a line
        coverage[index] = (coverage[index] or 0) + t.value
    return coverage


def build_source_files(report: AnyReport, root: Path | None = None) -> list[SourceFile]:
    """Tally by line and pair every measured file with its source text.

    Files keep the order in which they first appear in the records.
    """
    root = root or Path.cwd()

    by_file: dict[str, list[LineTally]] = {}
    for member in iter_reports(report):
        for t in tally_lines(member.records):
            by_file.setdefault(t.filename, []).append(t)

    source_files = []
    for name, tallies in by_file.items():
        lines = read_source_lines(root / name)
        source_files.append(
            SourceFile(
                name=name,
                source="\n".join(lines),
                coverage=line_coverage(name, tallies, len(lines)),
            )
        )
    return source_files


def build_payload(
    report: AnyReport,
    ci: CIMetadata | None,
    repo_token: str | None = None,
    *,
    git: GitInfo | None = None,
    run: CommandRunner | None = None,
    root: Path | None = None,
) -> dict[str, Any]:
    """Assemble the upload payload.

    With ``repo_token`` the payload is a job submission carrying git
    metadata (collected through ``run`` unless ``git`` is given). Without
    it the detected provider names the service.

    Raises:
        UnknownProviderError: No token and no detected provider.
        MalformedGitInfoError: Git metadata could not be collected.
        SourceReadError: A measured source file could not be used.
    """
    if not repo_token and ci is None:
        raise UnknownProviderError.no_target()

    payload: dict[str, Any]
    if ci is not None and not repo_token:
        payload = {"service_name": ci.service_name}
    else:
        if git is None:
            git = git_info(
                run or SubprocessRunner(cwd=root),
                branch=ci.branch if ci else None,
                remote_url=ci.remote_url if ci else None,
            )
        payload = {"repo_token": repo_token, "git": git.as_dict()}

    source_files = build_source_files(report, root=root)
    payload["source_files"] = [sf.as_dict() for sf in source_files]

    log.info(
        "payload_built",
        job=bool(repo_token),
        service=payload.get("service_name"),
        files=len(source_files),
    )
    return payload


def serialize_payload(payload: dict[str, Any]) -> str:
    """Serialize with scalars as bare JSON values and None as null."""
    return json.dumps(payload, ensure_ascii=False)
