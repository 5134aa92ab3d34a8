"""Pytest configuration for gh-discussions tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install, and provides fake HTTP plumbing so no
test ever reaches api.github.com.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from ghdiscussions.github_client import GitHubClient  # noqa: E402

TOKEN_VARS = (
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "GITHUB_ACCESS_TOKEN",
    "GH_ACCESS_TOKEN",
    "GITHUB_PAT",
    "GITHUB_API_URL",
    "GITHUB_GRAPHQL_URL",
    "GH_DISCUSSIONS_LOG_LEVEL",
    "GH_DISCUSSIONS_LOG_JSON",
    "GH_DISCUSSIONS_DOTENV_PATH",
)


@dataclass
class DummyResponse:
    status_code: int
    payload: Any

    @property
    def text(self) -> str:
        payload = self.payload
        if payload is None:
            return ""
        if isinstance(payload, (dict, list)):
            return json.dumps(payload)
        return str(payload)


class DummySession:
    def __init__(self, responses: list[DummyResponse] | None = None):
        self._responses = list(responses or [])
        self.request_log: list[tuple[str, str, dict[str, Any]]] = []
        self.headers: dict[str, str] = {}
        self.closed = False

    def queue(self, status_code: int, payload: Any) -> None:
        self._responses.append(DummyResponse(status_code, payload))

    def queue_data(self, data: Any) -> None:
        self.queue(200, {"data": data})

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        json: Any | None = None,
        timeout: float | None = None,
    ) -> DummyResponse:
        self.request_log.append((method, url, {"headers": headers, "json": json}))
        if not self._responses:
            raise AssertionError("No response queued for request")
        return self._responses.pop(0)

    def close(self) -> None:
        self.closed = True

    @property
    def variables(self) -> list[dict[str, Any]]:
        return [entry[2]["json"]["variables"] for entry in self.request_log]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in TOKEN_VARS:
        monkeypatch.delenv(name, raising=False)
    # no stray .env from the developer's checkout
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def session() -> DummySession:
    return DummySession()


@pytest.fixture
def client(session: DummySession) -> GitHubClient:
    return GitHubClient(token="tkn", session=session)  # type: ignore[arg-type]


@pytest.fixture
def fake_session(monkeypatch: pytest.MonkeyPatch) -> DummySession:
    """Patch ``requests.Session`` so the CLI builds its client on a DummySession."""
    dummy = DummySession()
    monkeypatch.setattr("ghdiscussions.github_client.requests.Session", lambda: dummy)
    return dummy
