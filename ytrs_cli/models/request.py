"""
The parsed intent of a single command-line invocation.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from .config import MediaKind


class Action(str, Enum):
    INSTALL_LIBS = "install-libs"
    SET_OUTPUT = "set-output"
    DOWNLOAD = "download"
    TRANSCRIPT = "transcript"
    STREAM = "stream"


class InvocationRequest(BaseModel):
    """One CLI run's intent and arguments. Created per run, discarded after dispatch."""

    action: Action
    source: str | None = None
    kind: MediaKind | None = None
    media_format: str | None = None
    play_after: bool = False
    language: str | None = None
    # None means "ask the user"
    summarize: bool | None = None
    model: str | None = None
    libs_override: Path | None = None
    output_override: Path | None = None

    class Config:
        """Pydantic model configuration."""

        frozen = True
