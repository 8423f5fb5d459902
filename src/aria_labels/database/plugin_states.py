"""
Active/inactive state of installed plugins.
"""

from typing import Optional

from sqlalchemy.orm import Session

from .models import PluginState, get_session
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PluginStates:
    """Reads and writes the ``plugin_states`` table."""

    def __init__(self, session: Optional[Session] = None):
        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> Session:
        if self._session is None:
            self._session = get_session()
        return self._session

    def close(self) -> None:
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None

    def _find(self, plugin_file: str) -> Optional[PluginState]:
        return (
            self.session.query(PluginState)
            .filter(PluginState.plugin_file == plugin_file)
            .first()
        )

    def is_active(self, plugin_file: str) -> bool:
        state = self._find(plugin_file)
        return bool(state and state.active)

    def set_active(self, plugin_file: str, active: bool) -> None:
        state = self._find(plugin_file)
        if state is None:
            state = PluginState(plugin_file=plugin_file, active=active)
            self.session.add(state)
        else:
            state.active = active
        self.session.commit()
        logger.info(f"{'Activated' if active else 'Deactivated'} plugin: {plugin_file}")

    def activate(self, plugin_file: str) -> None:
        self.set_active(plugin_file, True)

    def deactivate(self, plugin_file: str) -> None:
        self.set_active(plugin_file, False)
