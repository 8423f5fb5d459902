"""Core processing modules for Aria Labels."""

from .hooks import HookRegistry
from .blocks import Block, BlockAttributes
from .tag_processor import HTMLTagProcessor
from .aria_attributes import AriaAttributes
from .editor_settings import EditorSettings, get_editor_settings, block_attribute_schema
from .versions import compare_versions, is_newer
from .release import Release, UpdateOffer, UpdateCheck, PluginInformation
from .release_client import ReleaseClient, RepositoryTokenAuth
from .updater import Updater, CacheState

__all__ = [
    "HookRegistry",
    "Block",
    "BlockAttributes",
    "HTMLTagProcessor",
    "AriaAttributes",
    "EditorSettings",
    "get_editor_settings",
    "block_attribute_schema",
    "compare_versions",
    "is_newer",
    "Release",
    "UpdateOffer",
    "UpdateCheck",
    "PluginInformation",
    "ReleaseClient",
    "RepositoryTokenAuth",
    "Updater",
    "CacheState",
]
