"""
Data Models Layer.

This package contains Pydantic models that define the core data structures
used throughout the application, such as configuration, paths and the
parsed invocation request.
"""

from .config import AppConfig, AppPaths, MediaKind
from .media import MediaInfo, SearchResult
from .request import Action, InvocationRequest

__all__ = [
    "Action",
    "AppConfig",
    "AppPaths",
    "InvocationRequest",
    "MediaInfo",
    "MediaKind",
    "SearchResult",
]
