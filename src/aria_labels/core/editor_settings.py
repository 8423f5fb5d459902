"""
Settings exposed read-only to the block editor.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Mapping

from .hooks import HookRegistry
from ..utils.constants import (
    Hook,
    DEFAULT_ALLOWED_BLOCKS,
    BROKEN_NATIVE_LABEL_BLOCKS,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class EditorSettings:
    """Where the editor shows the controls and which blocks get them."""

    move_to_advanced: bool = True
    allowed_blocks: List[str] = field(
        default_factory=lambda: list(DEFAULT_ALLOWED_BLOCKS)
    )

    def to_dict(self) -> Dict[str, Any]:
        """The shape the editor script reads."""
        return {
            "moveToAdvanced": self.move_to_advanced,
            "allowedBlocks": list(self.allowed_blocks),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EditorSettings":
        return cls(
            move_to_advanced=bool(data.get("moveToAdvanced", True)),
            allowed_blocks=list(data.get("allowedBlocks", [])),
        )


def get_editor_settings(
    hooks: Optional[HookRegistry] = None,
    defaults: Optional[EditorSettings] = None,
) -> EditorSettings:
    """
    Compute the editor settings.

    The defaults pass through the ``aria_labels_settings`` filter as a plain
    mapping so callbacks can adjust either key.

    Args:
        hooks: Registry holding settings filters
        defaults: Starting settings (built-in defaults if omitted)

    Returns:
        The filtered settings
    """
    settings = defaults or EditorSettings()
    if hooks is None:
        return settings

    filtered = hooks.apply_filters(Hook.SETTINGS, settings.to_dict())
    if isinstance(filtered, EditorSettings):
        return filtered
    if not isinstance(filtered, Mapping):
        logger.warning(f"Ignoring settings filter result of type {type(filtered).__name__}")
        return settings
    return EditorSettings.from_dict(filtered)


def block_attribute_schema(
    block_name: str,
    supports: Optional[Mapping[str, Any]] = None,
    settings: Optional[EditorSettings] = None,
) -> Dict[str, Dict[str, Any]]:
    """
    Attributes the editor adds to a block type.

    Blocks with working native aria-label support keep their own label
    control, so only the hidden toggle is added for them.

    Args:
        block_name: Block type identifier, e.g. ``core/button``
        supports: The block type's ``supports`` mapping
        settings: Editor settings (defaults if omitted)

    Returns:
        Mapping of attribute name to its type and default
    """
    settings = settings or EditorSettings()
    if block_name not in settings.allowed_blocks:
        return {}

    supports = supports or {}
    native_label = (
        supports.get("ariaLabel") is True
        and block_name not in BROKEN_NATIVE_LABEL_BLOCKS
    )

    schema: Dict[str, Dict[str, Any]] = {
        "ariaHidden": {"type": "boolean", "default": False},
    }
    if not native_label:
        schema["ariaLabel"] = {"type": "string", "default": ""}
    return schema
