"""
Storage Layer.

This package resolves the directories used by the application and handles
the optional configuration file.
"""

from .config_manager import ConfigManager
from .paths import PathResolver, get_home_dir

__all__ = ["ConfigManager", "PathResolver", "get_home_dir"]
