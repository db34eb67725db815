from __future__ import annotations

from typing import Callable, Optional
from urllib.parse import quote

import requests

from shared.constants import DEFAULT_GITHUB_API_BASE, HTTP_TIMEOUT_SECONDS
from shared.retry import call_with_retry


class GitHubClient:
    def __init__(
        self,
        token_provider: Callable[[], str],
        api_base: str = DEFAULT_GITHUB_API_BASE,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._token_provider = token_provider
        self._api_base = api_base.rstrip("/")
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self._api_base}{path}"
        base_headers = kwargs.pop("headers", {})

        def _do_request() -> requests.Response:
            headers = dict(base_headers)
            headers.update(
                {
                    "Authorization": f"token {self._token_provider()}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": "2022-11-28",
                }
            )
            return self._session.request(method, url, headers=headers, timeout=HTTP_TIMEOUT_SECONDS, **kwargs)

        response = call_with_retry(
            operation_name=f"github_{method}_{path}",
            fn=_do_request,
            is_retryable_exception=lambda exc: isinstance(exc, requests.RequestException),
            is_retryable_result=lambda r: r.status_code in {403, 429} or r.status_code >= 500,
        )
        response.raise_for_status()
        return response

    # -- issue labels ----------------------------------------------------------

    def list_labels_on_issue(self, owner: str, repo: str, issue_number: int) -> list[dict]:
        """Return every label attached to an issue or pull request."""
        page = 1
        labels: list[dict] = []
        while True:
            response = self._request(
                "GET",
                f"/repos/{owner}/{repo}/issues/{issue_number}/labels",
                params={"per_page": 100, "page": page},
            )
            page_data = response.json()
            if not page_data:
                break
            labels.extend(page_data)
            if len(page_data) < 100:
                break
            page += 1
        return labels

    def add_labels(self, owner: str, repo: str, issue_number: int, labels: list[str]) -> list[dict]:
        response = self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/labels",
            json={"labels": labels},
        )
        return response.json()

    def remove_label(self, owner: str, repo: str, issue_number: int, name: str) -> None:
        self._request(
            "DELETE",
            f"/repos/{owner}/{repo}/issues/{issue_number}/labels/{quote(name, safe='')}",
        )

    # -- repository labels -----------------------------------------------------

    def list_repository_labels(self, owner: str, repo: str) -> list[dict]:
        page = 1
        labels: list[dict] = []
        while True:
            response = self._request(
                "GET",
                f"/repos/{owner}/{repo}/labels",
                params={"per_page": 100, "page": page},
            )
            page_data = response.json()
            if not page_data:
                break
            labels.extend(page_data)
            if len(page_data) < 100:
                break
            page += 1
        return labels

    def create_label(
        self,
        owner: str,
        repo: str,
        name: str,
        color: str,
        description: Optional[str] = None,
    ) -> dict:
        payload: dict = {"name": name, "color": color}
        if description:
            payload["description"] = description

        response = self._request(
            "POST",
            f"/repos/{owner}/{repo}/labels",
            json=payload,
        )
        return response.json()
