"""
Configuration loading for Aria Labels.

Defaults live in ``constants.DEFAULT_CONFIG``. An optional JSON file
overlays them, and the repository token can be supplied through the
environment so it never has to be written to disk.
"""

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, List, Mapping

import httpx

from . import constants
from .constants import DEFAULT_CONFIG, TOKEN_ENV_VAR
from .logger import get_logger

logger = get_logger(__name__)


@dataclass
class UpdaterConfig:
    """Settings for the release checker."""

    repository: str = constants.REPOSITORY
    plugin_file: str = constants.PLUGIN_FILE
    basename: str = constants.BASENAME
    transient_key: str = constants.TRANSIENT_KEY
    api_base: str = constants.GITHUB_API_BASE
    cache_ttl: int = constants.CACHE_TTL_SECONDS
    timeout: float = constants.HTTP_TIMEOUT
    token: Optional[str] = None

    @property
    def latest_release_url(self) -> str:
        """URL of the latest-release endpoint for the repository."""
        return f"{self.api_base.rstrip('/')}/repos/{self.repository}/releases/latest"

    @property
    def api_path(self) -> str:
        """Host, port and path prefix shared by every API URL of the repository."""
        base = httpx.URL(self.api_base)
        netloc = base.netloc.decode("ascii")
        if not netloc:
            return f"{self.api_base.rstrip('/')}/repos/{self.repository}"
        return f"{netloc}{base.path.rstrip('/')}/repos/{self.repository}"

    @property
    def plugin_dir_name(self) -> str:
        """Directory the plugin must live in, e.g. ``aria-labels``."""
        return Path(self.plugin_file).parent.name or self.basename


@dataclass
class AppConfig:
    """Top-level application configuration."""

    move_to_advanced: bool = True
    allowed_blocks: List[str] = field(
        default_factory=lambda: list(constants.DEFAULT_ALLOWED_BLOCKS)
    )
    updater: UpdaterConfig = field(default_factory=UpdaterConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Build a config from a nested mapping shaped like DEFAULT_CONFIG."""
        editor = data.get("editor", {})
        updater = data.get("updater", {})
        known = UpdaterConfig.__dataclass_fields__
        return cls(
            move_to_advanced=bool(editor.get("move_to_advanced", True)),
            allowed_blocks=list(
                editor.get("allowed_blocks", constants.DEFAULT_ALLOWED_BLOCKS)
            ),
            updater=UpdaterConfig(
                **{k: v for k, v in updater.items() if k in known}
            ),
        )


def _merge(base: Dict[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively overlay one mapping onto another."""
    for key, value in overlay.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """
    Load the application configuration.

    Args:
        path: JSON config file (defaults to CONFIG_FILE)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        AppConfig built from defaults, the config file and the environment
    """
    data = copy.deepcopy(DEFAULT_CONFIG)
    config_path = path or constants.CONFIG_FILE
    environ = os.environ if environ is None else environ

    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                overlay = json.load(f)
            if isinstance(overlay, dict):
                _merge(data, overlay)
            else:
                logger.warning(f"Ignoring config file without an object: {config_path}")
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read config file {config_path}: {e}")

    token = environ.get(TOKEN_ENV_VAR)
    if token:
        data["updater"]["token"] = token

    return AppConfig.from_dict(data)
