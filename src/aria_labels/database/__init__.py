"""Database module for Aria Labels."""

from .models import (
    Base,
    Transient,
    PluginState,
    get_engine,
    get_session,
    init_db,
)
from .transients import TransientStore, MemoryTransientStore, DatabaseTransientStore
from .plugin_states import PluginStates
