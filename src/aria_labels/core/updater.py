"""
Updates the plugin from its GitHub releases.
"""

import shutil
import tempfile
from enum import Enum, auto
from pathlib import Path
from typing import Optional, Dict, Any, Mapping, Union

from .hooks import HookRegistry
from .release import Release, UpdateOffer, UpdateCheck, PluginInformation
from .release_client import ReleaseClient
from .versions import is_newer
from ..database.plugin_states import PluginStates
from ..database.transients import TransientStore, MemoryTransientStore
from ..utils import constants
from ..utils.constants import Hook, PLUGIN_HEADER
from ..utils.config import UpdaterConfig
from ..utils.file_operations import FileOperations
from ..utils.logger import get_logger, log_operation

logger = get_logger(__name__)


class CacheState(Enum):
    """Freshness of the cached release data."""
    UNCHECKED = auto()  # nothing fetched yet
    CACHED = auto()     # fresh data in the cache
    STALE = auto()      # fetched before, but the cache expired


class Updater:
    """Checks the release feed, offers updates and installs them."""

    def __init__(
        self,
        config: Optional[UpdaterConfig] = None,
        cache: Optional[TransientStore] = None,
        client: Optional[ReleaseClient] = None,
        plugin_states: Optional[PluginStates] = None,
        plugin_header: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the updater.

        Args:
            config: Updater configuration
            cache: Transient store for the release data
            client: Release feed client
            plugin_states: Store of active plugins, used to reactivate after install
            plugin_header: Plugin metadata for the information popup
        """
        self.config = config or UpdaterConfig()
        self.cache = cache or MemoryTransientStore()
        self.client = client or ReleaseClient(self.config)
        self.plugin_states = plugin_states
        self.plugin_header = dict(plugin_header or PLUGIN_HEADER)
        self._response: Optional[Dict[str, Any]] = None
        self._checked = False

    def register(self, hooks: HookRegistry) -> None:
        """Attach the updater to the host's update filters."""
        hooks.add_filter(Hook.PLUGINS_API, self.plugin_popup, 10)
        hooks.add_filter(Hook.UPDATE_PLUGINS, self.modify_transient, 10)
        hooks.add_filter(Hook.POST_INSTALL, self.install_update, 10)

    @property
    def cache_state(self) -> CacheState:
        if self.cache.get(self.config.transient_key):
            return CacheState.CACHED
        return CacheState.STALE if self._checked else CacheState.UNCHECKED

    def get_repository_info(self, force_check: bool = False) -> Dict[str, Any]:
        """
        Get the latest release data, from memory, the cache or the feed.

        The result is kept for the lifetime of this instance and cached for
        the configured TTL. ``force_check`` skips both.

        Args:
            force_check: Always fetch from the feed

        Returns:
            The release document, or an empty dict when unavailable
        """
        if not force_check and self._response:
            return self._response

        cached = None if force_check else self.cache.get(self.config.transient_key)
        if isinstance(cached, dict) and cached:
            logger.debug("Using cached release data")
            self._response = cached
            self._checked = True
            return cached

        response = self.client.get_latest_release()
        self._checked = True

        if response:
            self.cache.set(self.config.transient_key, response, self.config.cache_ttl)

        self._response = response
        return response

    def get_latest_release(self, force_check: bool = False) -> Optional[Release]:
        return Release.from_dict(self.get_repository_info(force_check))

    def plugin_popup(self, result: Any, action: str, args: Any = None) -> Any:
        """
        Provide details for the plugin information popup.

        Args:
            result: Value returned by earlier callbacks
            action: The information requested
            args: Request arguments carrying the plugin ``slug``

        Returns:
            PluginInformation for this plugin, otherwise ``result`` unchanged
        """
        if action != "plugin_information":
            return result

        if _slug_of(args) != self.config.basename:
            return result

        release = self.get_latest_release()
        if release is None:
            return result

        header = self.plugin_header
        return PluginInformation(
            name=header.get("Name", ""),
            slug=self.config.basename,
            requires=header.get("RequiresWP", ""),
            requires_php=header.get("RequiresPHP", ""),
            version=release.tag_name,
            author=header.get("AuthorName", ""),
            author_profile=header.get("AuthorURI", ""),
            last_updated=release.published_at,
            homepage=header.get("PluginURI", ""),
            short_description=header.get("Description", ""),
            sections={
                "Description": header.get("Description", ""),
                "Updates": release.body,
            },
            download_link=release.zipball_url,
        )

    def modify_transient(self, transient: UpdateCheck) -> UpdateCheck:
        """
        Add an update offer to the host's update check when one exists.

        Args:
            transient: Installed versions and current offers

        Returns:
            The same record, with an offer added if the release is newer
        """
        checked = getattr(transient, "checked", None)
        if not checked:
            return transient

        plugin_file = self.config.plugin_file
        if plugin_file not in checked:
            return transient

        release = self.get_latest_release()
        if release is None:
            return transient

        if not is_newer(release.tag_name, checked[plugin_file]):
            logger.debug(f"Up to date: {checked[plugin_file]} (latest {release.tag_name})")
            return transient

        slug = self.config.basename.split("/")[0]
        transient.response[plugin_file] = UpdateOffer.for_release(release, slug)
        logger.info(f"Update available: {checked[plugin_file]} -> {release.tag_name}")
        return transient

    def install_update(
        self,
        response: Any,
        hook_extra: Optional[Mapping[str, Any]],
        result: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Move a freshly extracted release into the plugin's directory.

        Archives extract to a directory named after the commit, so the
        directory is renamed to the canonical plugin directory and the
        plugin is reactivated if it was active before.

        Args:
            response: Installation response from earlier callbacks
            hook_extra: Extra context; ``plugin`` names the plugin being installed
            result: Installation result holding the ``destination`` path

        Returns:
            The result with ``destination`` pointing at the plugin directory
        """
        plugin_file = self.config.plugin_file
        if hook_extra and hook_extra.get("plugin") not in (None, plugin_file):
            return result

        destination = result.get("destination") if result else None
        if not destination:
            logger.error("Install result has no destination")
            return result

        downloaded = Path(destination)
        correct = downloaded.parent / self.config.plugin_dir_name
        was_active = (
            self.plugin_states.is_active(plugin_file) if self.plugin_states else False
        )

        if not FileOperations.move_directory(downloaded, correct):
            logger.error(f"Could not move {downloaded} to {correct}")
            return result

        result = dict(result)
        result["destination"] = str(correct) if isinstance(destination, str) else correct
        logger.info(f"Installed update into {correct}")

        if was_active:
            self.plugin_states.activate(plugin_file)

        return result

    @log_operation(logger, "plugin upgrade")
    def upgrade(
        self,
        plugins_dir: Path,
        installed_version: str,
        force_check: bool = False,
    ) -> Optional[Release]:
        """
        Download and install the latest release if it is newer.

        Args:
            plugins_dir: Directory holding the plugin directory
            installed_version: Currently installed version
            force_check: Bypass the release cache

        Returns:
            The installed Release, or None if nothing was installed
        """
        release = self.get_latest_release(force_check)
        if release is None:
            logger.info("No release information available")
            return None

        if not is_newer(release.tag_name, installed_version):
            logger.info(f"Already up to date ({installed_version})")
            return None

        if not release.zipball_url:
            logger.error(f"Release {release.tag_name} has no download URL")
            return None

        constants.ensure_directories()
        archive = FileOperations.get_temp_path(suffix=".zip")
        staging = Path(tempfile.mkdtemp(prefix="aria_upgrade_", dir=constants.TEMP_DIR))
        try:
            if not self.client.download(release.zipball_url, archive):
                return None

            extracted = FileOperations.extract_zip(archive, staging)
            if extracted is None:
                return None

            source = plugins_dir / extracted.name
            if not FileOperations.move_directory(extracted, source):
                return None

            result = self.install_update(
                True,
                {"plugin": self.config.plugin_file},
                {"destination": str(source)},
            )
            if Path(result["destination"]) != plugins_dir / self.config.plugin_dir_name:
                return None

            return release
        finally:
            FileOperations.safe_delete(archive)
            shutil.rmtree(staging, ignore_errors=True)


def _slug_of(args: Union[Mapping[str, Any], str, None, Any]) -> Optional[str]:
    if args is None or isinstance(args, str):
        return args
    if isinstance(args, Mapping):
        return args.get("slug")
    return getattr(args, "slug", None)
