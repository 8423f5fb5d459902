"""
Typed records for rendered blocks.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Mapping, Union

from ..utils.constants import DEFAULT_NAMESPACE, DECORATIVE_IMAGE_BLOCKS

_KNOWN_ATTRS = ("ariaHidden", "ariaLabel", "alt")


def normalize_block_name(name: Optional[str]) -> str:
    """Qualify a bare block name with the default namespace."""
    if not name:
        return ""
    if "/" not in name:
        return f"{DEFAULT_NAMESPACE}/{name}"
    return name


@dataclass
class BlockAttributes:
    """Attributes declared on a block that the injector cares about."""

    aria_hidden: bool = False
    aria_label: str = ""
    alt: Optional[str] = None  # None means the block never declared alt text
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, attrs: Optional[Mapping[str, Any]]) -> "BlockAttributes":
        """Build from the host's camel-cased attribute mapping."""
        attrs = attrs or {}
        label = attrs.get("ariaLabel")
        alt = attrs.get("alt")
        return cls(
            aria_hidden=bool(attrs.get("ariaHidden")),
            aria_label=str(label) if label else "",
            alt=None if alt is None else str(alt),
            extra={k: v for k, v in attrs.items() if k not in _KNOWN_ATTRS},
        )


@dataclass
class Block:
    """A block descriptor as handed over by the render hook."""

    name: str = ""
    attrs: BlockAttributes = field(default_factory=BlockAttributes)

    def __post_init__(self):
        self.name = normalize_block_name(self.name)

    @classmethod
    def from_dict(cls, block: Mapping[str, Any]) -> "Block":
        """Build from a parsed block (``{"blockName": ..., "attrs": {...}}``)."""
        return cls(
            name=block.get("blockName") or "",
            attrs=BlockAttributes.from_dict(block.get("attrs")),
        )

    @classmethod
    def coerce(cls, block: Union["Block", Mapping[str, Any], None]) -> "Block":
        if isinstance(block, Block):
            return block
        return cls.from_dict(block or {})

    @property
    def has_custom_aria(self) -> bool:
        """Whether the block was configured with a hidden flag or a label."""
        return self.attrs.aria_hidden or bool(self.attrs.aria_label)

    @property
    def is_decorative_image(self) -> bool:
        """Image or cover block whose alt text is declared and empty."""
        return self.name in DECORATIVE_IMAGE_BLOCKS and self.attrs.alt == ""
