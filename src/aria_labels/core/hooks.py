"""
Filter pipeline used to wire the plugin into its host.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PRIORITY = 10


def _key(name: Any) -> str:
    # Hook enum members are accepted alongside plain names
    return str(getattr(name, "value", name))


@dataclass
class _Callback:
    priority: int
    order: int
    func: Callable[..., Any]


class HookRegistry:
    """Named filters, each a priority-ordered list of callbacks.

    A filter receives the current value plus any extra arguments and
    returns the (possibly replaced) value for the next callback.
    """

    def __init__(self):
        self._filters: Dict[str, List[_Callback]] = {}
        self._counter = 0

    def add_filter(
        self,
        name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
    ) -> None:
        """Register a callback for a filter."""
        self._counter += 1
        callbacks = self._filters.setdefault(_key(name), [])
        callbacks.append(_Callback(priority, self._counter, callback))
        callbacks.sort(key=lambda c: (c.priority, c.order))
        logger.debug(f"Registered filter {_key(name)} (priority {priority})")

    def remove_filter(
        self,
        name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
    ) -> bool:
        """Unregister a callback. Returns True if it was registered."""
        callbacks = self._filters.get(_key(name), [])
        for entry in callbacks:
            if entry.func == callback and entry.priority == priority:
                callbacks.remove(entry)
                return True
        return False

    def has_filter(self, name: str) -> bool:
        """Whether any callback is registered for a filter."""
        return bool(self._filters.get(_key(name)))

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        """Run a value through every callback of a filter."""
        for entry in list(self._filters.get(_key(name), [])):
            value = entry.func(value, *args)
        return value
