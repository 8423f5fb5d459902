"""Utility modules for Aria Labels."""

from .constants import *
from .logger import get_logger, setup_logging
from .file_operations import FileOperations
from .config import AppConfig, UpdaterConfig, load_config
