# Test configuration
import sys
from pathlib import Path

import httpx
import pytest

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

from metabase_mcp.config import MetabaseConfig  # noqa: E402

METABASE_URL = "https://metabase.example.com"


class FakeMetabase:
    """Stands in for the Metabase HTTP API and records every request."""

    def __init__(self):
        self.requests = []
        self._routes = {}

    def route(self, method, path, status=200, json=None, handler=None):
        self._routes[(method, path)] = handler or (lambda request: httpx.Response(status, json=json))

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Not found"})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def hits(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == path]


@pytest.fixture
def fake_metabase():
    return FakeMetabase()


@pytest.fixture
def password_config():
    return MetabaseConfig(url=METABASE_URL, username="analyst@example.com", password="s3cret")


@pytest.fixture
def api_key_config():
    return MetabaseConfig(url=METABASE_URL, api_key="mb_key")
