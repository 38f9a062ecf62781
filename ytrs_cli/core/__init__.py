"""
Core application engine for routing one invocation to its handler.

`build_request` turns command-line options into an `InvocationRequest`, and
the `Dispatcher` runs it against the libraries, the downloader, the player
and the summarizer.
"""

from .dispatcher import Dispatcher
from .routing import build_request

__all__ = ["Dispatcher", "build_request"]
