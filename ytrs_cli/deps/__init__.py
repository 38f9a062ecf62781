"""
Dependency Layer.

This package describes the external binaries the application drives and
installs them into the libraries directory on demand.
"""

from .installer import DependencyInstaller
from .registry import FFMPEG, REQUIRED_DEPENDENCIES, YT_DLP, Dependency, FetchSource

__all__ = [
    "FFMPEG",
    "REQUIRED_DEPENDENCIES",
    "YT_DLP",
    "Dependency",
    "DependencyInstaller",
    "FetchSource",
]
