"""CI provider detection from the process environment.

Providers are checked in PROVIDERS order and the first whose signature
variables are all set wins. Each profile is pure data naming the variables
that hold branch, commit, build and job identifiers, so supporting a new
CI system means adding a row.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from covreport.core.logging import get_logger

log = get_logger("providers")


@dataclass(frozen=True, slots=True)
class CIMetadata:
    """Identifiers for the current CI build."""

    provider_name: str
    branch: str | None = None
    commit_id: str | None = None
    build_id: str | None = None
    job_id: str | None = None
    remote_url: str | None = None

    @property
    def service_name(self) -> str:
        return self.provider_name.lower()


@dataclass(frozen=True, slots=True)
class ProviderProfile:
    """Environment signature and variable mapping of one CI system.

    Attributes:
        name: Provider name, unless ``name_var`` supplies it.
        signature: Variables that must all be set (non-empty) to match.
        signature_value: If set, the first signature variable must equal this
            (case-insensitive).
        name_var: Variable whose value is the provider name.
        branch, commit, build, job, remote_url: Variables holding each field.
    """

    name: str
    signature: tuple[str, ...]
    signature_value: str | None = None
    name_var: str | None = None
    branch: str | None = None
    commit: str | None = None
    build: str | None = None
    job: str | None = None
    remote_url: str | None = None

    def matches(self, env: Mapping[str, str]) -> bool:
        if not all(env.get(var) for var in self.signature):
            return False
        if self.signature_value is not None:
            return env[self.signature[0]].lower() == self.signature_value.lower()
        return True

    def extract(self, env: Mapping[str, str]) -> CIMetadata:
        def read(var: str | None) -> str | None:
            return (env.get(var) or None) if var else None

        return CIMetadata(
            provider_name=read(self.name_var) or self.name,
            branch=read(self.branch),
            commit_id=read(self.commit),
            build_id=read(self.build),
            job_id=read(self.job),
            remote_url=read(self.remote_url),
        )


# Priority order: earlier rows win when several signatures match
PROVIDERS: tuple[ProviderProfile, ...] = (
    ProviderProfile(
        name="travis-ci",
        signature=("TRAVIS",),
        branch="TRAVIS_BRANCH",
        commit="TRAVIS_COMMIT",
        build="TRAVIS_JOB_NUMBER",
        job="TRAVIS_JOB_ID",
    ),
    ProviderProfile(
        name="appveyor",
        signature=("APPVEYOR",),
        branch="APPVEYOR_REPO_BRANCH",
        commit="APPVEYOR_REPO_COMMIT",
        build="APPVEYOR_BUILD_NUMBER",
        job="APPVEYOR_JOB_ID",
    ),
    ProviderProfile(
        name="circleci",
        signature=("CIRCLECI",),
        branch="CIRCLE_BRANCH",
        commit="CIRCLE_SHA1",
        build="CIRCLE_BUILD_NUM",
        job="CIRCLE_BUILD_NUM",
    ),
    ProviderProfile(
        name="jenkins",
        signature=("JENKINS_URL",),
        branch="GIT_BRANCH",
        commit="GIT_COMMIT",
        build="BUILD_NUMBER",
        job="BUILD_NUMBER",
    ),
    ProviderProfile(
        name="ci",
        signature=("CI_NAME",),
        name_var="CI_NAME",
        branch="CI_BRANCH",
        commit="CI_COMMIT_ID",
        build="CI_BUILD_NUMBER",
        job="CI_BUILD_NUMBER",
        remote_url="CI_REMOTE",
    ),
    ProviderProfile(
        name="drone",
        signature=("DRONE",),
        branch="DRONE_BRANCH",
        commit="DRONE_COMMIT",
        build="DRONE_BUILD_NUMBER",
        job="DRONE_BUILD_NUMBER",
    ),
    ProviderProfile(
        name="semaphore",
        signature=("SEMAPHORE",),
        branch="BRANCH_NAME",
        commit="REVISION",
        build="SEMAPHORE_BUILD_NUMBER",
        job="SEMAPHORE_BUILD_NUMBER",
    ),
    ProviderProfile(
        name="wercker",
        signature=("WERCKER_GIT_BRANCH",),
        branch="WERCKER_GIT_BRANCH",
        commit="WERCKER_GIT_COMMIT",
        build="WERCKER_MAIN_PIPELINE_STARTED",
        job="WERCKER_MAIN_PIPELINE_STARTED",
    ),
    ProviderProfile(
        name="codecov",
        signature=("CODECOV_TOKEN",),
    ),
    ProviderProfile(
        name="ci",
        signature=("CI",),
        signature_value="true",
    ),
)


def detect(
    env: Mapping[str, str] | None = None,
    providers: Sequence[ProviderProfile] = PROVIDERS,
) -> CIMetadata | None:
    """Return metadata for the first matching provider, or None for local runs."""
    env = os.environ if env is None else env
    for profile in providers:
        if profile.matches(env):
            ci = profile.extract(env)
            log.debug("provider_detected", provider=ci.provider_name, branch=ci.branch)
            return ci
    log.debug("provider_not_detected")
    return None
