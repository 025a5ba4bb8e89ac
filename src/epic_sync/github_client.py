from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from .errors import CollaboratorFailure
from .models import STATES, CrossReference, EpicRecord, TaskRecord

logger = logging.getLogger(__name__)


class GitHubAPIError(CollaboratorFailure):
    """Raised for GitHub API related errors."""


class GitHubClient:
    """
    Minimal GitHub REST API v3 client implementing the issue store.

    Every failure, network or HTTP, is raised as GitHubAPIError naming the
    request. Nothing is retried.
    """

    def __init__(self, token: str, repo: str, api_url: str = "https://api.github.com", timeout: int = 30) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repo or "/" not in repo:
            raise ValueError("Repo must be in 'owner/name' format")
        self.repo = repo
        self.base_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "epic-sync/0.1",
        })

    def _url(self, path: str) -> str:
        return f"{self.base_url}/repos/{self.repo}{path}"

    def _request(self, method: str, url: str, allow_status: Iterable[int] = (), **kwargs: Any) -> requests.Response:
        logger.debug("GitHub %s %s", method, url)
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error("GitHub request failed: %s %s", method, url)
            raise GitHubAPIError(f"GitHub request failed for {method} {url}: {e}") from e
        if resp.status_code >= 400 and resp.status_code not in allow_status:
            try:
                detail = resp.json()
            except ValueError:
                detail = {"message": resp.text}
            msg = f"GitHub API error {resp.status_code} for {method} {url}: {detail}"
            logger.error(msg)
            raise GitHubAPIError(msg)
        return resp

    @staticmethod
    def _check_state(state: str) -> None:
        if state not in STATES:
            raise ValueError(f"state must be one of {STATES}, got {state!r}")

    def _patch_issue(self, number: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        resp = self._request("PATCH", self._url(f"/issues/{number}"), json=payload)
        return resp.json()

    # Issues
    def get_task(self, number: int) -> Optional[TaskRecord]:
        resp = self._request("GET", self._url(f"/issues/{number}"), allow_status=(404, 410))
        if resp.status_code >= 400:
            logger.warning("Issue #%s not found (HTTP %s)", number, resp.status_code)
            return None
        return TaskRecord.from_issue(resp.json())

    def update_task_state(self, number: int, state: str) -> None:
        self._check_state(state)
        logger.info("Setting issue #%s state to %s", number, state)
        self._patch_issue(number, {"state": state})

    def update_epic_state(self, number: int, state: str) -> None:
        self._check_state(state)
        logger.info("Setting Epic #%s state to %s", number, state)
        self._patch_issue(number, {"state": state})

    def update_epic_body(self, number: int, text: str) -> None:
        logger.debug("Updating body of issue #%s", number)
        self._patch_issue(number, {"body": text})

    # Comments
    def add_comment(self, number: int, text: str) -> None:
        logger.debug("Commenting on issue #%s", number)
        self._request("POST", self._url(f"/issues/{number}/comments"), json={"body": text})

    # Timeline
    def list_cross_references(self, task_number: int) -> List[CrossReference]:
        """Issues and pull requests in this repository that mention the task."""
        refs: List[CrossReference] = []
        url: Optional[str] = self._url(f"/issues/{task_number}/timeline")
        params: Optional[Dict[str, Any]] = {"per_page": 100}
        while url:
            resp = self._request("GET", url, params=params)
            for event in resp.json():
                ref = self._cross_reference(event)
                if ref is not None:
                    refs.append(ref)
            # The next link already carries the query string
            url = resp.links.get("next", {}).get("url")
            params = None
        logger.debug("Issue #%s has %d cross references", task_number, len(refs))
        return refs

    def _cross_reference(self, event: Dict[str, Any]) -> Optional[CrossReference]:
        if event.get("event") != "cross-referenced":
            return None
        source = event.get("source") or {}
        issue = source.get("issue")
        if not issue:
            return None
        repo_url = issue.get("repository_url")
        if repo_url and not repo_url.endswith(f"/repos/{self.repo}"):
            return None
        kind = "pull_request" if "pull_request" in issue else source.get("type", "issue")
        return CrossReference(source_kind=kind, source_record=EpicRecord.from_issue(issue))
