from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import requests

# Ensure repository root is on sys.path so the local package can be imported
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Stands in for `requests.Session`, replaying queued responses.

    Each queued item is a FakeResponse, a plain payload (wrapped in a 200
    response) or an exception to raise.
    """

    def __init__(self) -> None:
        self.posts: List[Any] = []
        self.gets: List[Any] = []
        self.calls: List[Dict[str, Any]] = []

    def _next(self, queue: List[Any], method: str, url: str) -> FakeResponse:
        if not queue:
            raise AssertionError(f"unexpected {method} {url}")
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, FakeResponse):
            return item
        return FakeResponse(item)

    def post(self, url: str, json: Optional[dict] = None, headers=None, timeout=None):
        self.calls.append({"method": "POST", "url": url, "json": json, "headers": headers})
        return self._next(self.posts, "POST", url)

    def get(self, url: str, headers=None, timeout=None):
        self.calls.append({"method": "GET", "url": url, "headers": headers})
        return self._next(self.gets, "GET", url)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def config_home(tmp_path, monkeypatch) -> Path:
    monkeypatch.setenv("LEETCODE_MCP_HOME", str(tmp_path))
    return tmp_path
