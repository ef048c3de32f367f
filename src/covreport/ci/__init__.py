"""CI provider detection, payload building and coverage-service upload.

Usage:
    from covreport.ci import coveralls

    # Anonymous submission from a recognised CI provider
    coveralls(report)

    # Job submission with git metadata
    coveralls(report, repo_token=os.environ["COVERALLS_TOKEN"])
"""

from covreport.ci.git import (
    CommandRunner,
    GitHead,
    GitInfo,
    GitRemote,
    SubprocessRunner,
    git_branch,
    git_head,
    git_info,
    git_remotes,
    parse_head,
    parse_remotes,
)
from covreport.ci.payload import (
    SourceFile,
    build_payload,
    build_source_files,
    line_coverage,
    serialize_payload,
)
from covreport.ci.providers import PROVIDERS, CIMetadata, ProviderProfile, detect
from covreport.ci.upload import ServiceResponse, coveralls, submit

__all__ = [
    # Providers
    "CIMetadata",
    "PROVIDERS",
    "ProviderProfile",
    "detect",
    # Git
    "CommandRunner",
    "GitHead",
    "GitInfo",
    "GitRemote",
    "SubprocessRunner",
    "git_branch",
    "git_head",
    "git_info",
    "git_remotes",
    "parse_head",
    "parse_remotes",
    # Payload
    "SourceFile",
    "build_payload",
    "build_source_files",
    "line_coverage",
    "serialize_payload",
    # Upload
    "ServiceResponse",
    "coveralls",
    "submit",
]
