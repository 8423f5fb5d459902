"""
Adds aria-hidden and aria-label attributes to rendered blocks.
"""

from typing import Any, Mapping, Optional, Union

from .blocks import Block
from .hooks import HookRegistry
from .tag_processor import HTMLTagProcessor
from ..utils.constants import Hook, IMAGE_BLOCK
from ..utils.logger import get_logger

logger = get_logger(__name__)

BlockLike = Union[Block, Mapping[str, Any]]


class AriaAttributes:
    """Injects configured ARIA attributes into a block's markup."""

    def register(self, hooks: HookRegistry) -> None:
        """Attach the injector to the block render filter."""
        hooks.add_filter(Hook.RENDER_BLOCK, self.render_block, 10)

    def render_block(self, block_content: str, block: Optional[BlockLike]) -> str:
        """
        Add aria-hidden and aria-label attributes to the block's HTML if they
        are set in the block's attributes.

        Never raises: markup that cannot be processed is returned as given.

        Args:
            block_content: The block's HTML
            block: The block descriptor or the host's parsed-block mapping

        Returns:
            The modified block HTML
        """
        try:
            parsed = Block.coerce(block)
        except (TypeError, AttributeError) as e:
            logger.warning(f"Unreadable block descriptor, leaving markup as is: {e}")
            return block_content

        if not block_content or not (parsed.has_custom_aria or parsed.is_decorative_image):
            return block_content

        try:
            updated = block_content
            if parsed.has_custom_aria:
                updated = self.apply_custom_attributes(updated, parsed)

            if parsed.is_decorative_image and not parsed.attrs.aria_hidden:
                updated = self.hide_decorative_image(updated)

            return updated
        except Exception as e:
            logger.error(f"Failed to add ARIA attributes to {parsed.name or 'block'}: {e}")
            return block_content

    def apply_custom_attributes(self, markup: str, block: Block) -> str:
        """Set the configured hidden flag and label on the target element."""
        anchors = self.count_tags(markup, "a")
        tags = HTMLTagProcessor(markup)

        if anchors == 1:
            found = tags.next_tag("a")
        elif anchors == 0 and block.name == IMAGE_BLOCK:
            found = tags.next_tag("img")
        else:
            found = tags.next_tag()

        if not found:
            logger.debug(f"No target element in {block.name or 'block'} markup")
            return markup

        if block.attrs.aria_hidden:
            tags.set_attribute("aria-hidden", "true")
        if block.attrs.aria_label:
            tags.set_attribute("aria-label", block.attrs.aria_label)

        updated = tags.get_updated_html()

        if anchors == 1 and block.attrs.aria_label:
            updated = self.strip_wrapper_label(updated)

        return updated

    def hide_decorative_image(self, markup: str) -> str:
        """Mark the first image as hidden from assistive technology."""
        tags = HTMLTagProcessor(markup)
        if not tags.next_tag("img"):
            logger.debug("Decorative image block has no <img> element")
            return markup
        tags.set_attribute("aria-hidden", "true")
        return tags.get_updated_html()

    @staticmethod
    def strip_wrapper_label(markup: str) -> str:
        """Drop a label the host put on the wrapper when the anchor carries one."""
        tags = HTMLTagProcessor(markup)
        if tags.next_tag() and tags.get_tag() != "a":
            tags.remove_attribute("aria-label")
        return tags.get_updated_html()

    @staticmethod
    def count_tags(markup: str, tag_name: str) -> int:
        tags = HTMLTagProcessor(markup)
        count = 0
        while tags.next_tag(tag_name):
            count += 1
        return count
