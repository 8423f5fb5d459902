"""
Constants and configuration values for Aria Labels.
"""

from pathlib import Path
from enum import Enum
from typing import Dict, Any, Tuple

from .. import __version__

# Application Info
APP_NAME = "Aria Labels"
APP_VERSION = __version__
APP_AUTHOR = "Aria Labels Team"

# Paths
HOME_DIR = Path.home()
APP_DATA_DIR = HOME_DIR / ".aria-labels"
CONFIG_FILE = APP_DATA_DIR / "config.json"
DATABASE_FILE = APP_DATA_DIR / "database.sqlite"
LOG_FILE = APP_DATA_DIR / "logs" / "app.log"
TEMP_DIR = APP_DATA_DIR / "temp"

# Environment variable holding the token for private repositories
TOKEN_ENV_VAR = "ARIA_LABELS_GITHUB_TOKEN"


# Plugin header, shown in the plugin information popup
PLUGIN_HEADER: Dict[str, str] = {
    "Name": "Aria Labels",
    "PluginURI": "https://github.com/Silver0034/Aria-Labels",
    "Description": (
        "Enhance accessibility by adding aria-hidden and aria-label "
        "attributes to Gutenberg blocks."
    ),
    "Version": __version__,
    "AuthorName": "Jacob Lodes",
    "AuthorURI": "http://jlodes.com/",
    "RequiresWP": "",
    "RequiresPHP": "",
    "TextDomain": "aria-labels",
}


# Updater
REPOSITORY = "sunmorgn/aria-labels"
PLUGIN_FILE = "aria-labels/aria-labels.php"
BASENAME = "aria-labels"
TRANSIENT_KEY = "aria_labels_github_response"
GITHUB_API_BASE = "https://api.github.com"
HOUR_IN_SECONDS = 60 * 60
CACHE_TTL_SECONDS = 12 * HOUR_IN_SECONDS
HTTP_TIMEOUT = 30


# Hook names
class Hook(str, Enum):
    """Filter names the plugin registers against."""
    RENDER_BLOCK = "render_block"
    SETTINGS = "aria_labels_settings"
    PLUGINS_API = "plugins_api"
    UPDATE_PLUGINS = "pre_set_site_transient_update_plugins"
    POST_INSTALL = "upgrader_post_install"


# Block names
IMAGE_BLOCK = "core/image"
COVER_BLOCK = "core/cover"
DECORATIVE_IMAGE_BLOCKS: Tuple[str, ...] = (IMAGE_BLOCK, COVER_BLOCK)
DEFAULT_NAMESPACE = "core"

# Blocks that declare native aria-label support without rendering a control
BROKEN_NATIVE_LABEL_BLOCKS: Tuple[str, ...] = ("core/group",)

DEFAULT_ALLOWED_BLOCKS: Tuple[str, ...] = (
    # Interactive Elements
    "core/button",
    "core/file",
    "core/search",
    "core/social-link",

    # Media
    "core/image",
    "core/video",
    "core/cover",
    "core/gallery",

    # Layout & Grouping
    "core/group",
    "core/columns",
    "core/column",
)


# Default Configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "move_to_advanced": True,
        "allowed_blocks": list(DEFAULT_ALLOWED_BLOCKS),
    },
    "updater": {
        "repository": REPOSITORY,
        "plugin_file": PLUGIN_FILE,
        "basename": BASENAME,
        "transient_key": TRANSIENT_KEY,
        "api_base": GITHUB_API_BASE,
        "cache_ttl": CACHE_TTL_SECONDS,
        "timeout": HTTP_TIMEOUT,
        "token": None,
    },
}


def ensure_directories():
    """Create necessary application directories."""
    for directory in [APP_DATA_DIR, TEMP_DIR, LOG_FILE.parent]:
        directory.mkdir(parents=True, exist_ok=True)
