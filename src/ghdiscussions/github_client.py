from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any

import requests

from .config import DEFAULT_API_URL
from .errors import DiscussionsError
from .logging import get_logger

DEFAULT_GRAPHQL_URL = f"{DEFAULT_API_URL}/graphql"
USER_AGENT = "gh-discussions/0.1.0"
HTTP_ERROR_STATUS = 400
REQUEST_TIMEOUT = 30


class GitHubAPIError(DiscussionsError):
    """Raised when the GitHub REST/GraphQL API returns an error.

    ``response_body`` holds the decoded JSON payload when the response was
    JSON, otherwise the raw text, so callers can print it for diagnosis.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response_body: Any | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.response_body = response_body


def _decode_body(response: requests.Response) -> Any:
    raw = response.text
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


@dataclass
class GitHubClient:
    """Stateless REST/GraphQL transport for the Discussions API."""

    token: str
    api_url: str = DEFAULT_API_URL
    graphql_url: str = DEFAULT_GRAPHQL_URL
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = self.session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": USER_AGENT,
            }
        )

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _send(self, method: str, url: str, json_body: Any | None) -> requests.Response:
        headers = dict(self._session.headers)
        if json_body is not None:
            headers["Content-Type"] = "application/json"
        logger = get_logger()
        start = time.perf_counter()
        try:
            response = self._session.request(
                method,
                url,
                json=json_body,
                headers=headers,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            logger.log_request(method, url, None, (time.perf_counter() - start) * 1000)
            raise GitHubAPIError(f"GitHub API {method} {url} failed: {exc}") from exc
        logger.log_request(method, url, response.status_code, (time.perf_counter() - start) * 1000)
        return response

    # ---- GraphQL ------------------------------------------------------
    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> Any:
        payload = {"query": query, "variables": variables or {}}
        response = self._send("POST", self.graphql_url, payload)
        data = _decode_body(response)
        failed = response.status_code >= HTTP_ERROR_STATUS
        if not failed and not isinstance(data, dict):
            failed = True
        if failed or data.get("errors") is not None:
            raise GitHubAPIError(
                "GitHub GraphQL API request failed",
                status=response.status_code,
                response_body=data,
            )
        return data.get("data")

    # ---- REST helpers -------------------------------------------------
    def rest(self, method: str, path: str, json_body: Any | None = None) -> Any:
        url = (
            path
            if path.startswith("http")
            else f"{self.api_url.rstrip('/')}/{path.lstrip('/')}"
        )
        response = self._send(method, url, json_body)
        data = _decode_body(response)
        if response.status_code >= HTTP_ERROR_STATUS:
            raise GitHubAPIError(
                f"GitHub REST API request failed with status {response.status_code}",
                status=response.status_code,
                response_body=data,
            )
        return data


__all__ = ["GitHubAPIError", "GitHubClient", "USER_AGENT", "DEFAULT_GRAPHQL_URL"]
