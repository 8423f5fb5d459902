"""Tests for the release feed client."""

import logging

import httpx
import pytest

from aria_labels.core.release import Release
from aria_labels.core.release_client import ReleaseClient, RepositoryTokenAuth
from aria_labels.utils.config import UpdaterConfig
from aria_labels.utils.logger import LogCapture

from conftest import FakeFeed

LATEST_URL = "https://api.github.com/repos/sunmorgn/aria-labels/releases/latest"


def make_client(feed, token=None):
    config = UpdaterConfig(token=token)
    return ReleaseClient(config, transport=httpx.MockTransport(feed))


class TestGetLatestRelease:
    """Tests for fetching the latest release."""

    def test_fetches_latest_release(self, fake_feed, release_payload):
        client = make_client(fake_feed)

        assert client.get_latest_release() == release_payload
        assert fake_feed.calls == 1
        assert str(fake_feed.requests[0].url) == LATEST_URL
        assert fake_feed.requests[0].method == "GET"

    def test_release_record(self, fake_feed):
        release = Release.from_dict(make_client(fake_feed).get_latest_release())

        assert release.tag_name == "v1.2.0"
        assert release.version == "1.2.0"
        assert release.zipball_url.endswith("/zipball/v1.2.0")

    @pytest.mark.parametrize("status", [301, 404, 403, 500])
    def test_non_success_status_returns_empty(self, release_payload, status):
        feed = FakeFeed(status_code=status, payload=release_payload)

        assert make_client(feed).get_latest_release() == {}

    def test_invalid_json_returns_empty(self):
        feed = FakeFeed(content=b"<html>rate limited</html>")

        assert make_client(feed).get_latest_release() == {}

    def test_failure_is_logged(self):
        feed = FakeFeed(status_code=404)

        with LogCapture("aria_labels.core.release_client") as capture:
            make_client(feed).get_latest_release()

        warnings = capture.messages(logging.WARNING)
        assert any("HTTP 404" in message for message in warnings)

    def test_non_object_json_returns_empty(self):
        feed = FakeFeed(payload=["not", "an", "object"])

        assert make_client(feed).get_latest_release() == {}

    def test_transport_error_returns_empty(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = ReleaseClient(UpdaterConfig(), transport=httpx.MockTransport(refuse))

        assert client.get_latest_release() == {}

    def test_custom_api_base(self, fake_feed):
        config = UpdaterConfig(api_base="https://api.example.test", repository="me/plugin")
        client = ReleaseClient(config, transport=httpx.MockTransport(fake_feed))
        client.get_latest_release()

        assert str(fake_feed.requests[0].url) == "https://api.example.test/repos/me/plugin/releases/latest"


class TestTokenAuth:
    """Tests for the repository-scoped token."""

    def test_no_token_no_header(self, fake_feed):
        make_client(fake_feed).get_latest_release()

        assert "Authorization" not in fake_feed.requests[0].headers

    def test_token_sent_to_release_feed(self, fake_feed):
        make_client(fake_feed, token="secret").get_latest_release()

        assert fake_feed.requests[0].headers["Authorization"] == "Bearer secret"

    def test_token_sent_to_repository_download(self, fake_feed, tmp_path):
        client = make_client(fake_feed, token="secret")
        url = "https://api.github.com/repos/sunmorgn/aria-labels/zipball/v1.2.0"
        fake_feed.add_route(url, httpx.Response(200, content=b"zip"))

        assert client.download(url, tmp_path / "a.zip") is True
        assert fake_feed.requests[0].headers["Authorization"] == "Bearer secret"

    def test_token_not_sent_elsewhere(self, fake_feed, tmp_path):
        client = make_client(fake_feed, token="secret")
        url = "https://example.com/repos/sunmorgn/aria-labels/archive.zip"
        fake_feed.add_route(url, httpx.Response(200, content=b"zip"))

        client.download(url, tmp_path / "a.zip")

        assert "Authorization" not in fake_feed.requests[0].headers

    @pytest.mark.parametrize("url,expected", [
        ("https://api.github.com/repos/sunmorgn/aria-labels/releases/latest", True),
        ("https://api.github.com/repos/sunmorgn/aria-labels", True),
        ("https://api.github.com/repos/sunmorgn/aria-labels-pro/releases/latest", False),
        ("https://api.github.com/repos/other/aria-labels/releases/latest", False),
        ("https://codeload.github.com/sunmorgn/aria-labels/legacy.zip/v1.2.0", False),
    ])
    def test_matches(self, url, expected):
        auth = RepositoryTokenAuth("secret", "api.github.com/repos/sunmorgn/aria-labels")

        assert auth.matches(httpx.URL(url)) is expected

    @pytest.mark.parametrize("url,expected", [
        ("https://ghe.example.test/api/v3/repos/sunmorgn/aria-labels/releases/latest", True),
        ("https://ghe.example.test/repos/sunmorgn/aria-labels/releases/latest", False),
        ("https://ghe.example.test:8443/api/v3/repos/sunmorgn/aria-labels", False),
    ])
    def test_matches_enterprise_path(self, url, expected):
        config = UpdaterConfig(api_base="https://ghe.example.test/api/v3")
        auth = RepositoryTokenAuth("secret", config.api_path)

        assert auth.matches(httpx.URL(url)) is expected

    @pytest.mark.parametrize("url,expected", [
        ("https://ghe.example.test:8443/api/v3/repos/sunmorgn/aria-labels/zipball/v1", True),
        ("https://ghe.example.test/api/v3/repos/sunmorgn/aria-labels/zipball/v1", False),
    ])
    def test_matches_base_with_port(self, url, expected):
        config = UpdaterConfig(api_base="https://ghe.example.test:8443/api/v3")
        auth = RepositoryTokenAuth("secret", config.api_path)

        assert auth.matches(httpx.URL(url)) is expected

    @pytest.mark.parametrize("api_base", [
        "https://ghe.example.test/api/v3",
        "https://ghe.example.test:8443/api/v3",
    ])
    def test_token_sent_to_enterprise_feed(self, fake_feed, api_base):
        config = UpdaterConfig(api_base=api_base, token="secret")
        client = ReleaseClient(config, transport=httpx.MockTransport(fake_feed))
        client.get_latest_release()

        assert str(fake_feed.requests[0].url) == f"{api_base}/repos/sunmorgn/aria-labels/releases/latest"
        assert fake_feed.requests[0].headers["Authorization"] == "Bearer secret"

    def test_redirected_download_drops_token(self, fake_feed, tmp_path):
        client = make_client(fake_feed, token="secret")
        api_url = "https://api.github.com/repos/sunmorgn/aria-labels/zipball/v1.2.0"
        cdn_url = "https://codeload.github.com/sunmorgn/aria-labels/legacy.zip/v1.2.0"
        fake_feed.add_route(api_url, httpx.Response(302, headers={"Location": cdn_url}))
        fake_feed.add_route(cdn_url, httpx.Response(200, content=b"zipdata"))

        target = tmp_path / "a.zip"
        assert client.download(api_url, target) is True
        assert target.read_bytes() == b"zipdata"
        assert fake_feed.requests[0].headers["Authorization"] == "Bearer secret"
        assert "Authorization" not in fake_feed.requests[1].headers


class TestDownload:
    """Tests for downloading release archives."""

    def test_failed_download(self, tmp_path):
        feed = FakeFeed(status_code=404, content=b"missing")
        target = tmp_path / "a.zip"

        assert make_client(feed).download("https://api.github.com/x.zip", target) is False
        assert not target.exists()
