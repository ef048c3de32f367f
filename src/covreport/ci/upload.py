"""Submit a coverage payload to the coverage service.

One multipart POST per upload with a single ``json_file`` field; any 2xx
status is success. There is no retry here.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from covreport.ci.git import CommandRunner
from covreport.ci.payload import build_payload, serialize_payload
from covreport.ci.providers import detect
from covreport.config.models import COVERALLS_ENDPOINT
from covreport.core.errors import UploadError
from covreport.core.logging import get_logger
from covreport.coverage.models import AnyReport

log = get_logger("upload")

JSON_FIELD = "json_file"


@dataclass(frozen=True, slots=True)
class ServiceResponse:
    """Status and raw body returned by the coverage service."""

    status_code: int
    body: str

    def json(self) -> Any:
        return json.loads(self.body)


def submit(
    payload: dict[str, Any],
    *,
    endpoint: str = COVERALLS_ENDPOINT,
    timeout: float = 30.0,
    client: httpx.Client | None = None,
) -> ServiceResponse:
    """POST the serialized payload as the ``json_file`` multipart field.

    Args:
        payload: Output of build_payload.
        endpoint: Job submission URL.
        timeout: Request timeout in seconds.
        client: Optional preconfigured client (tests pass a mock transport).

    Raises:
        UploadError: On transport failure or a non-2xx status.
    """
    body = serialize_payload(payload).encode("utf-8")
    files = {JSON_FIELD: ("coverage.json", body, "application/json")}

    try:
        if client is None:
            response = httpx.post(endpoint, files=files, timeout=timeout)
        else:
            response = client.post(endpoint, files=files, timeout=timeout)
    except httpx.HTTPError as e:
        log.error("upload_failed", endpoint=endpoint, error=str(e))
        raise UploadError.transport(endpoint, str(e)) from e

    if not response.is_success:
        log.error("upload_failed", endpoint=endpoint, status=response.status_code)
        raise UploadError.bad_status(endpoint, response.status_code, response.text)

    log.info("upload_submitted", endpoint=endpoint, status=response.status_code)
    return ServiceResponse(status_code=response.status_code, body=response.text)


def coveralls(
    report: AnyReport,
    *,
    repo_token: str | None = None,
    env: Mapping[str, str] | None = None,
    run: CommandRunner | None = None,
    root: Path | None = None,
    endpoint: str = COVERALLS_ENDPOINT,
    timeout: float = 30.0,
    client: httpx.Client | None = None,
) -> ServiceResponse:
    """Detect the CI provider, build the payload and submit it.

    Raises:
        UnknownProviderError: No provider detected and no ``repo_token``.
        MalformedGitInfoError: Git metadata could not be collected.
        SourceReadError: A measured source file could not be used.
        UploadError: Submission failed.
    """
    ci = detect(env)
    payload = build_payload(report, ci, repo_token, run=run, root=root)
    return submit(payload, endpoint=endpoint, timeout=timeout, client=client)
