"""
Pytest configuration and fixtures for Aria Labels tests.
"""

import pytest
import tempfile
import sys
import json
from pathlib import Path

import httpx

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture(scope="session")
def temp_app_dir():
    """Create a temporary application directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def mock_app_dirs(temp_app_dir, monkeypatch):
    """Mock application directories to use temp directory."""
    monkeypatch.setattr(
        "aria_labels.utils.constants.APP_DATA_DIR",
        temp_app_dir,
    )
    monkeypatch.setattr(
        "aria_labels.utils.constants.DATABASE_FILE",
        temp_app_dir / "test.db",
    )
    monkeypatch.setattr(
        "aria_labels.utils.constants.LOG_FILE",
        temp_app_dir / "logs" / "test.log",
    )
    monkeypatch.setattr(
        "aria_labels.utils.constants.TEMP_DIR",
        temp_app_dir / "temp",
    )
    monkeypatch.setattr(
        "aria_labels.utils.constants.CONFIG_FILE",
        temp_app_dir / "missing-config.json",
    )


@pytest.fixture
def temp_db(tmp_path):
    """Create a temporary database for testing."""
    from aria_labels.database.models import init_db

    db_path = tmp_path / "test.db"
    init_db(db_path)
    yield db_path


@pytest.fixture
def release_payload():
    """A latest-release document as the feed returns it."""
    return {
        "tag_name": "v1.2.0",
        "published_at": "2024-05-01T12:00:00Z",
        "body": "Bug fixes",
        "zipball_url": "https://api.github.com/repos/sunmorgn/aria-labels/zipball/v1.2.0",
        "html_url": "https://github.com/sunmorgn/aria-labels/releases/tag/v1.2.0",
    }


class FakeFeed:
    """Request handler for httpx.MockTransport that records every request."""

    def __init__(self, status_code=200, payload=None, content=None):
        self.status_code = status_code
        self.payload = payload
        self.content = content
        self.requests = []
        self.routes = {}

    def add_route(self, url, response):
        self.routes[url] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        route = self.routes.get(str(request.url))
        if route is not None:
            return route(request) if callable(route) else route

        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, content=json.dumps(self.payload))

    @property
    def calls(self):
        return len(self.requests)


@pytest.fixture
def fake_feed(release_payload):
    """A release feed that serves the sample release."""
    return FakeFeed(payload=release_payload)
