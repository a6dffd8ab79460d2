"""Pytest shared fixtures: fake HTTP session, client and API bundle."""
import io
import json
import os
import pathlib
import sys
from types import SimpleNamespace
from typing import Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep audit writes out of the working tree unless a test redirects them
os.environ.setdefault("AUDIT_LOG_DIR", str(ROOT / ".runtime" / "test-audit"))

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from sumologic_connector.core.sumologic import SumoLogicAPI, SumoLogicClient

BASE_URL = "https://api.sumologic.com"


def make_response(
    status_code: int = 200,
    body=None,
    headers: Optional[dict] = None,
    url: str = BASE_URL,
    raw=None,
) -> requests.Response:
    """Build a real ``requests.Response`` backed by an in-memory body."""
    if body is None:
        content = b""
    elif isinstance(body, bytes):
        content = body
    else:
        content = json.dumps(body).encode("utf-8")

    resp = requests.Response()
    resp.status_code = status_code
    resp.headers = CaseInsensitiveDict(headers or {})
    resp.url = url
    resp.raw = raw if raw is not None else io.BytesIO(content)
    return resp


class FakeSession:
    """Stands in for ``requests.Session``: replays queued responses in order."""

    def __init__(self):
        self.calls = []
        self._responses = []
        self.closed = False

    def queue(self, status_code: int = 200, body=None, headers: Optional[dict] = None, raw=None):
        self._responses.append((status_code, body, headers, raw))
        return self

    def fail_with(self, exc: Exception):
        self._responses.append(exc)
        return self

    def request(self, method, url, **kwargs):
        self.calls.append(SimpleNamespace(method=method, url=url, **kwargs))
        if not self._responses:
            raise AssertionError(f"Unexpected HTTP {method} in test: {url}")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        status_code, body, headers, raw = item
        return make_response(status_code, body, headers, url=url, raw=raw)

    def close(self):
        self.closed = True


@pytest.fixture()
def session():
    return FakeSession()


@pytest.fixture()
def client(session):
    return SumoLogicClient(BASE_URL, "access-id", "access-key", session=session)


@pytest.fixture()
def api(client):
    return SumoLogicAPI.from_client(client)


@pytest.fixture()
def temp_audit_dir(monkeypatch, tmp_path):
    """Provide isolated audit directory for each test."""
    from sumologic_connector import audit

    audit_dir = tmp_path / "audit"
    audit_file = audit_dir / "provisioning-events.jsonl"

    monkeypatch.setattr(audit, "AUDIT_LOG_DIR", audit_dir)
    monkeypatch.setattr(audit, "AUDIT_LOG_FILE", audit_file)
    monkeypatch.setenv("AUDIT_LOG_SIGNING_KEY", "test-signing-key-for-audit-trail")

    yield audit_dir, audit_file


@pytest.fixture()
def response_factory():
    """Expose ``make_response`` to tests that build their own fake sessions."""
    return make_response
