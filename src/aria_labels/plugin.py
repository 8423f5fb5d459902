"""
Wires the attribute injector and the updater into a hook registry.
"""

from dataclasses import dataclass
from typing import Optional

from .core.aria_attributes import AriaAttributes
from .core.hooks import HookRegistry
from .core.updater import Updater
from .utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Plugin:
    """The registered components."""

    hooks: HookRegistry
    aria_attributes: AriaAttributes
    updater: Optional[Updater] = None


def register(
    hooks: Optional[HookRegistry] = None,
    updater: Optional[Updater] = None,
    is_admin: bool = False,
) -> Plugin:
    """
    Register the plugin's filters.

    The injector always runs; the updater only takes part in admin
    requests.

    Args:
        hooks: Registry to register with (a new one if omitted)
        updater: Updater to use on admin requests (a default one if omitted)
        is_admin: Whether this is an admin request

    Returns:
        The registered components
    """
    hooks = hooks or HookRegistry()

    aria_attributes = AriaAttributes()
    aria_attributes.register(hooks)

    if is_admin:
        updater = updater or Updater()
        updater.register(hooks)
    else:
        updater = None

    logger.debug(f"Registered plugin filters (admin={is_admin})")
    return Plugin(hooks=hooks, aria_attributes=aria_attributes, updater=updater)
