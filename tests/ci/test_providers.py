"""Tests for CI provider detection."""

from __future__ import annotations

import pytest

from covreport.ci.providers import PROVIDERS, CIMetadata, ProviderProfile, detect


class TestDetect:
    """Provider selection."""

    def test_no_provider(self) -> None:
        assert detect({}) is None

    @pytest.mark.parametrize(
        ("env", "expected"),
        [
            (
                {
                    "TRAVIS": "true",
                    "TRAVIS_BRANCH": "main",
                    "TRAVIS_COMMIT": "abc",
                    "TRAVIS_JOB_NUMBER": "12.1",
                    "TRAVIS_JOB_ID": "9876",
                },
                CIMetadata("travis-ci", "main", "abc", "12.1", "9876"),
            ),
            (
                {
                    "APPVEYOR": "True",
                    "APPVEYOR_REPO_BRANCH": "dev",
                    "APPVEYOR_REPO_COMMIT": "def",
                    "APPVEYOR_BUILD_NUMBER": "4",
                },
                CIMetadata("appveyor", "dev", "def", "4", None),
            ),
            (
                {
                    "CIRCLECI": "true",
                    "CIRCLE_BRANCH": "feat",
                    "CIRCLE_SHA1": "123",
                    "CIRCLE_BUILD_NUM": "77",
                },
                CIMetadata("circleci", "feat", "123", "77", "77"),
            ),
            (
                {
                    "JENKINS_URL": "http://ci",
                    "GIT_BRANCH": "origin/main",
                    "GIT_COMMIT": "c0ffee",
                    "BUILD_NUMBER": "8",
                },
                CIMetadata("jenkins", "origin/main", "c0ffee", "8", "8"),
            ),
            (
                {
                    "CI_NAME": "FAKECI",
                    "CI_BRANCH": "fakebranch",
                    "CI_COMMIT_ID": "f00",
                    "CI_BUILD_NUMBER": "2",
                    "CI_REMOTE": "covr",
                },
                CIMetadata("FAKECI", "fakebranch", "f00", "2", "2", "covr"),
            ),
            (
                {"DRONE": "true", "DRONE_BRANCH": "b", "DRONE_COMMIT": "c"},
                CIMetadata("drone", "b", "c"),
            ),
            (
                {"SEMAPHORE": "true", "BRANCH_NAME": "b", "REVISION": "r"},
                CIMetadata("semaphore", "b", "r"),
            ),
            (
                {"WERCKER_GIT_BRANCH": "b", "WERCKER_GIT_COMMIT": "c"},
                CIMetadata("wercker", "b", "c"),
            ),
            ({"CODECOV_TOKEN": "tok"}, CIMetadata("codecov")),
            ({"CI": "true"}, CIMetadata("ci")),
            ({"CI": "TRUE"}, CIMetadata("ci")),
        ],
    )
    def test_each_provider(self, env: dict[str, str], expected: CIMetadata) -> None:
        assert detect(env) == expected

    def test_ci_other_than_true_is_not_a_provider(self) -> None:
        assert detect({"CI": "false"}) is None

    def test_empty_variable_counts_as_absent(self) -> None:
        assert detect({"TRAVIS": "", "CI": "true"}) == CIMetadata("ci")

    def test_higher_priority_wins(self) -> None:
        """Travis beats the generic CI flag and Drone."""
        env = {"CI": "true", "DRONE": "true", "TRAVIS": "true", "TRAVIS_BRANCH": "t"}

        result = detect(env)

        assert result is not None
        assert result.provider_name == "travis-ci"
        assert result.branch == "t"

    def test_ci_name_beats_drone(self) -> None:
        """The CI_NAME row precedes the Drone row."""
        result = detect({"CI_NAME": "DRONE", "DRONE": "true", "DRONE_BRANCH": "x"})

        assert result is not None
        assert result.provider_name == "DRONE"
        assert result.branch is None

    def test_every_pair_is_exclusive(self) -> None:
        """For any two matching rows, the earlier one is chosen."""
        for i, first in enumerate(PROVIDERS):
            for second in PROVIDERS[i + 1 :]:
                env = {var: "true" for var in (*first.signature, *second.signature)}
                result = detect(env)
                assert result is not None
                assert result == first.extract(env)

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for profile in PROVIDERS:
            for var in profile.signature:
                monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("CIRCLECI", "true")
        monkeypatch.setenv("CIRCLE_BRANCH", "env-branch")

        result = detect()

        assert result is not None
        assert result.provider_name == "circleci"
        assert result.branch == "env-branch"

    def test_custom_table(self) -> None:
        """Adding a provider is a data change."""
        table = (ProviderProfile(name="buildkite", signature=("BUILDKITE",), branch="BK_BRANCH"),)

        result = detect({"BUILDKITE": "1", "BK_BRANCH": "x", "TRAVIS": "1"}, providers=table)

        assert result == CIMetadata("buildkite", branch="x")


class TestCIMetadata:
    def test_service_name_lowercased(self) -> None:
        assert CIMetadata("FAKECI").service_name == "fakeci"
