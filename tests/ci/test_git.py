"""Tests for git metadata collection."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from covreport.ci.git import (
    BRANCH_ARGS,
    FIELD_SEP,
    HEAD_ARGS,
    REMOTES_ARGS,
    GitHead,
    GitRemote,
    SubprocessRunner,
    git_head,
    git_info,
    parse_head,
    parse_remotes,
)
from covreport.core.errors import ErrorCode, MalformedGitInfoError

HEAD_OUTPUT = FIELD_SEP.join(["a", "b", "c", "d", "e", "f"])


class FakeRunner:
    """CommandRunner returning canned output per command."""

    def __init__(self, outputs: dict[tuple[str, ...], str]) -> None:
        self.outputs = outputs
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str]) -> str:
        self.calls.append(args)
        return self.outputs[tuple(args)]


class TestParseHead:
    def test_six_fields(self) -> None:
        assert parse_head(HEAD_OUTPUT + "\n") == GitHead("a", "b", "c", "d", "e", "f")

    def test_field_names(self) -> None:
        head = parse_head(HEAD_OUTPUT)

        assert head.as_dict() == {
            "id": "a",
            "author_name": "b",
            "author_email": "c",
            "committer_name": "d",
            "committer_email": "e",
            "message": "f",
        }

    def test_empty_message_is_still_six_fields(self) -> None:
        head = parse_head(FIELD_SEP.join(["a", "b", "c", "d", "e", ""]))

        assert head.message == ""

    @pytest.mark.parametrize(
        "output",
        [
            "",
            FIELD_SEP.join(["a", "b", "c", "d", "e"]),
            FIELD_SEP.join(["a", "b", "c", "d", "e", "f", "g"]),
            "a\nb\nc\nd\ne\nf",
            HEAD_OUTPUT + "\nsecond line",
        ],
    )
    def test_malformed(self, output: str) -> None:
        with pytest.raises(MalformedGitInfoError) as exc_info:
            parse_head(output)

        assert exc_info.value.code == ErrorCode.GIT_MALFORMED_INFO


class TestParseRemotes:
    def test_fetch_push_pairs_collapse(self) -> None:
        output = (
            "origin\thttps://github.com/o/r.git (fetch)\n"
            "origin\thttps://github.com/o/r.git (push)\n"
            "upstream\tgit@github.com:u/r.git (fetch)\n"
        )

        assert parse_remotes(output) == [
            GitRemote("origin", "https://github.com/o/r.git"),
            GitRemote("upstream", "git@github.com:u/r.git"),
        ]

    def test_plain_name_url_lines(self) -> None:
        assert parse_remotes("origin\tcovr\n\n") == [GitRemote("origin", "covr")]

    def test_no_remotes(self) -> None:
        assert parse_remotes("") == []

    def test_line_without_tab(self) -> None:
        with pytest.raises(MalformedGitInfoError):
            parse_remotes("origin https://example.com\n")


class TestGitInfo:
    def test_remote_url_from_ci_skips_remote_query(self) -> None:
        run = FakeRunner({tuple(HEAD_ARGS): HEAD_OUTPUT})

        info = git_info(run, branch="fakebranch", remote_url="covr")

        assert info.head == GitHead("a", "b", "c", "d", "e", "f")
        assert info.branch == "fakebranch"
        assert info.remotes == [GitRemote("origin", "covr")]
        assert run.calls == [HEAD_ARGS]

    def test_queries_branch_and_remotes_when_unknown(self) -> None:
        run = FakeRunner(
            {
                tuple(HEAD_ARGS): HEAD_OUTPUT,
                tuple(REMOTES_ARGS): "origin\thttps://x (fetch)\n",
                tuple(BRANCH_ARGS): "main\n",
            }
        )

        info = git_info(run)

        assert info.branch == "main"
        assert info.remotes == [GitRemote("origin", "https://x")]
        assert info.as_dict() == {
            "head": GitHead("a", "b", "c", "d", "e", "f").as_dict(),
            "branch": "main",
            "remotes": [{"name": "origin", "url": "https://x"}],
        }

    def test_head_queried_once(self) -> None:
        run = FakeRunner({tuple(HEAD_ARGS): HEAD_OUTPUT})

        git_head(run)

        assert run.calls == [HEAD_ARGS]


class TestSubprocessRunner:
    @patch("covreport.ci.git.subprocess.run")
    def test_returns_stdout(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=0, stdout="out\n", stderr="")

        result = SubprocessRunner(timeout=5)(["git", "status"])

        assert result == "out\n"
        assert mock_run.call_args.kwargs["timeout"] == 5

    @patch("covreport.ci.git.subprocess.run")
    def test_nonzero_exit(self, mock_run: MagicMock) -> None:
        mock_run.return_value = MagicMock(returncode=128, stdout="", stderr="fatal: not a repo")

        with pytest.raises(MalformedGitInfoError) as exc_info:
            SubprocessRunner()(HEAD_ARGS)

        assert exc_info.value.code == ErrorCode.GIT_COMMAND_FAILED
        assert "not a repo" in exc_info.value.message

    @patch("covreport.ci.git.subprocess.run")
    def test_timeout(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="git", timeout=1)

        with pytest.raises(MalformedGitInfoError):
            SubprocessRunner(timeout=1)(HEAD_ARGS)

    @patch("covreport.ci.git.subprocess.run")
    def test_git_missing(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = FileNotFoundError("git")

        with pytest.raises(MalformedGitInfoError):
            SubprocessRunner()(HEAD_ARGS)
