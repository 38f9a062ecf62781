"""
Media Processing Layer.

This package is responsible for HTTP transfers and metadata tagging of
downloaded files.
"""

from .downloader import Downloader
from .tagger import Tagger

__all__ = ["Downloader", "Tagger"]
