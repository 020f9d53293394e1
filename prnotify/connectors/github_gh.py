"""GitHub activity source backed by the gh CLI."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from enum import Enum
from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, ValidationError

from prnotify.connectors.base import ActivitySource
from prnotify.errors import SourceDataError, SourceFetchError

logger = logging.getLogger(__name__)

DEFAULT_HOSTNAME = "github.com"
SEARCH_RESULT_LIMIT = 1000
_RecordT = TypeVar("_RecordT", bound=BaseModel)


class GithubUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    login: str


class GithubIssue(BaseModel):
    """Search result item for a pull request."""

    model_config = ConfigDict(extra="ignore")

    id: int
    number: int
    title: str
    user: GithubUser
    html_url: str


class GithubComment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    body: str | None = None
    user: GithubUser
    html_url: str


class GithubReviewState(str, Enum):
    COMMENTED = "COMMENTED"
    APPROVED = "APPROVED"
    CHANGES_REQUESTED = "CHANGES_REQUESTED"
    DISMISSED = "DISMISSED"
    PENDING = "PENDING"


class GithubReview(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    body: str | None = None
    state: GithubReviewState
    user: GithubUser
    html_url: str


class GithubReviewComment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    pull_request_review_id: int | None = None
    body: str | None = None
    user: GithubUser


class GithubApiError(SourceFetchError):
    def __init__(self, message: str, *, endpoint: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.returncode = returncode


class GithubGhClient:
    def __init__(
        self,
        hostname: str = DEFAULT_HOSTNAME,
        gh_bin: str = "gh",
        *,
        token: str | None = None,
        cookie: str | None = None,
    ) -> None:
        self.hostname = hostname
        self.gh_bin = gh_bin
        self.token = token
        self.cookie = cookie

    def get_paginated(self, endpoint: str, per_page: int = 100) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            payload = self.get_page(endpoint, page=page, per_page=per_page)
            if not isinstance(payload, list):
                raise SourceDataError(f"Expected a JSON array from {endpoint}, got {type(payload).__name__}")
            if not payload:
                break
            items.extend(payload)
            page += 1
        return items

    def search_paginated(self, endpoint: str, per_page: int = 100) -> list[dict[str, Any]]:
        """Walk a search endpoint, whose pages wrap results in ``items``."""
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            payload = self.get_page(endpoint, page=page, per_page=per_page)
            if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
                raise SourceDataError(f"Expected a search result object from {endpoint}")
            batch = payload["items"]
            if not batch:
                break
            items.extend(batch)
            total = payload.get("total_count")
            if isinstance(total, int) and len(items) >= total:
                break
            if page * per_page >= SEARCH_RESULT_LIMIT:
                logger.warning("Search %s has more than %s results; the rest are not reachable", endpoint, SEARCH_RESULT_LIMIT)
                break
            page += 1
        return items

    def get_page(self, endpoint: str, *, page: int, per_page: int = 100) -> Any:
        query = f"{endpoint}{'&' if '?' in endpoint else '?'}per_page={per_page}&page={page}"
        return self._api_json(query)

    def _command(self, endpoint: str, method: str) -> list[str]:
        cmd = [self.gh_bin, "api", endpoint.lstrip("/"), "--hostname", self.hostname]
        cmd.extend(["-X", method])
        cmd.extend(["-H", "Accept: application/vnd.github+json"])
        if self.cookie:
            cmd.extend(["-H", f"Cookie: {self.cookie}"])
        return cmd

    def _env(self) -> dict[str, str] | None:
        if not self.token:
            return None
        env = dict(os.environ)
        if self.hostname == DEFAULT_HOSTNAME:
            env["GH_TOKEN"] = self.token
        else:
            env["GH_ENTERPRISE_TOKEN"] = self.token
        return env

    def _api_json(self, endpoint: str, method: str = "GET") -> Any:
        cmd = self._command(endpoint, method)
        logger.debug("gh api %s %s", method, endpoint)
        try:
            proc = subprocess.run(cmd, text=True, capture_output=True, check=False, env=self._env())
        except OSError as exc:
            raise GithubApiError(f"Could not run {self.gh_bin}: {exc}", endpoint=endpoint) from exc

        if proc.returncode != 0:
            raise GithubApiError(
                f"gh api failed: {endpoint}\n{proc.stderr.strip()}",
                endpoint=endpoint,
                returncode=proc.returncode,
            )

        output = proc.stdout.strip()
        if not output:
            return None
        try:
            return json.loads(output)
        except json.JSONDecodeError as exc:
            raise SourceDataError(f"gh api returned invalid JSON for {endpoint}: {exc}") from exc


def _validate_all(model: type[_RecordT], payload: list[dict[str, Any]], endpoint: str) -> list[_RecordT]:
    try:
        return [model.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise SourceDataError(f"Malformed {model.__name__} record from {endpoint}: {exc}") from exc


class GithubGhSourceConnector(ActivitySource):
    def __init__(
        self,
        hostname: str = DEFAULT_HOSTNAME,
        gh_bin: str = "gh",
        *,
        token: str | None = None,
        cookie: str | None = None,
    ) -> None:
        self.hostname = hostname
        self.client = GithubGhClient(hostname=hostname, gh_bin=gh_bin, token=token, cookie=cookie)

    def search_pull_requests(self, query: str) -> list[GithubIssue]:
        endpoint = f"search/issues?q={quote(query)}"
        payload = self.client.search_paginated(endpoint)
        logger.debug("Search %r returned %s pull requests", query, len(payload))
        return _validate_all(GithubIssue, payload, endpoint)

    def list_issue_comments(self, repo: str, pr_number: int) -> list[GithubComment]:
        endpoint = f"repos/{repo}/issues/{pr_number}/comments"
        return _validate_all(GithubComment, self.client.get_paginated(endpoint), endpoint)

    def list_reviews(self, repo: str, pr_number: int) -> list[GithubReview]:
        endpoint = f"repos/{repo}/pulls/{pr_number}/reviews"
        return _validate_all(GithubReview, self.client.get_paginated(endpoint), endpoint)

    def list_review_comments(self, repo: str, pr_number: int) -> list[GithubReviewComment]:
        endpoint = f"repos/{repo}/pulls/{pr_number}/comments"
        return _validate_all(GithubReviewComment, self.client.get_paginated(endpoint), endpoint)
