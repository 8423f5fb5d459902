"""
HTTP client for the GitHub release feed.
"""

from pathlib import Path
from typing import Optional, Dict, Any, Generator

import httpx

from .. import __version__
from ..utils.config import UpdaterConfig
from ..utils.file_operations import FileOperations
from ..utils.logger import get_logger

logger = get_logger(__name__)


class RepositoryTokenAuth(httpx.Auth):
    """Adds the access token to requests for one repository's API URLs.

    Requests anywhere else, including the redirect targets of archive
    downloads, go out without it.
    """

    def __init__(self, token: Optional[str], api_path: str):
        self.token = token
        self.api_path = api_path.rstrip("/")

    def matches(self, url: httpx.URL) -> bool:
        """Whether a URL belongs to the configured repository's API path."""
        location = f"{url.netloc.decode('ascii')}{url.path}"
        if not location.startswith(self.api_path):
            return False
        rest = location[len(self.api_path):]
        return rest == "" or rest.startswith("/")

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self.token and self.matches(request.url):
            request.headers["Authorization"] = f"Bearer {self.token}"
        yield request


class ReleaseClient:
    """Reads the latest release and downloads release archives."""

    def __init__(
        self,
        config: Optional[UpdaterConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Updater configuration
            transport: Optional httpx transport (used by tests)
        """
        self.config = config or UpdaterConfig()
        self.auth = RepositoryTokenAuth(self.config.token, self.config.api_path)
        self._client = httpx.Client(
            timeout=self.config.timeout,
            auth=self.auth,
            follow_redirects=True,
            headers={
                "Accept": "application/vnd.github+json",
                "User-Agent": f"aria-labels/{__version__}",
            },
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ReleaseClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def get_latest_release(self) -> Dict[str, Any]:
        """
        Get the latest release from the configured repository.

        Returns:
            The decoded release document, or an empty dict on any failure
        """
        url = self.config.latest_release_url

        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"Release check failed for {url}: {e}")
            return {}

        if not response.is_success:
            logger.warning(f"Release check for {url} returned HTTP {response.status_code}")
            return {}

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Release feed returned invalid JSON: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning("Release feed returned JSON that is not an object")
            return {}

        return data

    def download(self, url: str, destination: Path) -> bool:
        """
        Stream a release archive to disk.

        Args:
            url: Archive URL
            destination: File to write

        Returns:
            True if successful
        """
        try:
            with self._client.stream("GET", url) as response:
                if not response.is_success:
                    logger.error(f"Download of {url} returned HTTP {response.status_code}")
                    return False
                with open(destination, "wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
        except (httpx.HTTPError, OSError) as e:
            logger.error(f"Download of {url} failed: {e}")
            FileOperations.safe_delete(destination)
            return False

        logger.info(f"Downloaded {url} -> {destination}")
        return True
