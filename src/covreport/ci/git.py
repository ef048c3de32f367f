"""Git metadata for job submissions.

All git access goes through a CommandRunner (``args -> stdout``) so tests can
substitute canned output for a real process.
"""

from __future__ import annotations

import subprocess
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Protocol

from covreport.core.errors import MalformedGitInfoError
from covreport.core.logging import get_logger

log = get_logger("git")

FIELD_SEP = "\x1f"

# %x1f is git's escape for the unit separator
HEAD_FORMAT = "%x1f".join(["%H", "%aN", "%ae", "%cN", "%ce", "%s"])
HEAD_ARGS = ["git", "log", "-1", f"--pretty=format:{HEAD_FORMAT}"]
REMOTES_ARGS = ["git", "remote", "-v"]
BRANCH_ARGS = ["git", "rev-parse", "--abbrev-ref", "HEAD"]


class CommandRunner(Protocol):
    """Run a command and return its stdout."""

    def __call__(self, args: list[str]) -> str: ...


class SubprocessRunner:
    """CommandRunner backed by subprocess."""

    def __init__(self, cwd: Path | None = None, timeout: float = 30.0) -> None:
        self.cwd = cwd
        self.timeout = timeout

    def __call__(self, args: list[str]) -> str:
        try:
            result = subprocess.run(
                args,
                cwd=str(self.cwd) if self.cwd else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise MalformedGitInfoError.command_failed(args, f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise MalformedGitInfoError.command_failed(args, str(e)) from e

        if result.returncode != 0:
            raise MalformedGitInfoError.command_failed(args, result.stderr.strip())
        return result.stdout


@dataclass(frozen=True, slots=True)
class GitHead:
    """The commit being reported on."""

    id: str
    author_name: str
    author_email: str
    committer_name: str
    committer_email: str
    message: str

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class GitRemote:
    name: str
    url: str

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


HEAD_FIELD_COUNT = len(GitHead.__dataclass_fields__)


def parse_head(output: str) -> GitHead:
    """Split one unit-separated line into the six head fields.

    Raises:
        MalformedGitInfoError: If the output is not exactly six fields on one line.
    """
    line = output.rstrip("\r\n")
    fields = line.split(FIELD_SEP)
    if "\n" in line or len(fields) != HEAD_FIELD_COUNT:
        raise MalformedGitInfoError.wrong_field_count(output, HEAD_FIELD_COUNT, len(fields))
    return GitHead(*fields)


def parse_remotes(output: str) -> list[GitRemote]:
    """Parse ``name<TAB>url`` lines, ignoring ``(fetch)``/``(push)`` suffixes.

    Duplicate (name, url) pairs are collapsed, keeping first-seen order.
    """
    remotes: list[GitRemote] = []
    seen: set[tuple[str, str]] = set()
    for line in output.splitlines():
        if not line.strip():
            continue
        name, sep, rest = line.partition("\t")
        if not sep:
            raise MalformedGitInfoError.command_failed(REMOTES_ARGS, f"unparseable line: {line!r}")
        url = rest.strip()
        if url.endswith(")") and " (" in url:
            url = url.rsplit(" (", 1)[0]
        if (name, url) in seen:
            continue
        seen.add((name, url))
        remotes.append(GitRemote(name=name, url=url))
    return remotes


def git_head(run: CommandRunner) -> GitHead:
    head = parse_head(run(HEAD_ARGS))
    log.debug("git_head", id=head.id)
    return head


def git_remotes(run: CommandRunner) -> list[GitRemote]:
    return parse_remotes(run(REMOTES_ARGS))


def git_branch(run: CommandRunner) -> str:
    return run(BRANCH_ARGS).strip()


@dataclass(frozen=True, slots=True)
class GitInfo:
    """Head, branch and remotes sent with a job submission."""

    head: GitHead
    branch: str
    remotes: list[GitRemote]

    def as_dict(self) -> dict[str, Any]:
        return {
            "head": self.head.as_dict(),
            "branch": self.branch,
            "remotes": [r.as_dict() for r in self.remotes],
        }


def git_info(
    run: CommandRunner,
    *,
    branch: str | None = None,
    remote_url: str | None = None,
) -> GitInfo:
    """Collect git metadata, preferring values already known from the CI environment.

    A known ``remote_url`` becomes the single remote ``origin`` and no remote
    query is made; an unknown ``branch`` is read from the checkout.
    """
    head = git_head(run)
    if remote_url:
        remotes = [GitRemote(name="origin", url=remote_url)]
    else:
        remotes = git_remotes(run)
    return GitInfo(head=head, branch=branch or git_branch(run), remotes=remotes)
